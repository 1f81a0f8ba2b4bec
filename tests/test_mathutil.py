import numpy as np
import pytest

from policydeploy.mathutil import almost_equal, clip, read_csv, square


@pytest.mark.parametrize("x", [0.0, 1.5, -2.25, 7])
def test_square_is_symmetric_and_nonnegative(x):
    assert square(x) == square(-x)
    assert square(x) >= 0


def test_square_of_one():
    assert square(1) == 1


def test_clip_bounds():
    assert clip(5.0, 1.0, -1.0) == 1.0
    assert clip(-5.0, 1.0, -1.0) == -1.0
    assert clip(0.3, 1.0, -1.0) == 0.3


def test_almost_equal():
    a = np.array([[1.0, 2.0], [3.0, 4.0]])
    assert almost_equal(a, a + 1e-6, 1e-3)
    assert not almost_equal(a, a + 1e-2, 1e-3)


def test_almost_equal_tolerance_is_strict():
    a = np.zeros(3)
    b = np.array([0.0, 0.0, 0.5])
    assert not almost_equal(a, b, 0.5)


def test_almost_equal_shape_mismatch():
    with pytest.raises(ValueError):
        almost_equal(np.zeros(3), np.zeros(4), 1.0)


def test_read_csv_basic(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("1,2,3\n4,5,6\n")
    result = read_csv(path, 2, 3)
    assert np.array_equal(result, np.array([[1, 2, 3], [4, 5, 6]], dtype=float))


def test_read_csv_skiprows_and_truncation(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b,c\n1.5,2.5,3.5,9\n7,8,9,10\n11,12\n")
    result = read_csv(path, 2, 2, skiprows=1)
    assert np.array_equal(result, np.array([[1.5, 2.5], [7, 8]]))


def test_read_csv_pads_missing_cells(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("1,2\n")
    result = read_csv(path, 3, 4)
    assert result.shape == (3, 4)
    assert result[0, 0] == 1 and result[0, 1] == 2
    assert not np.any(result[0, 2:])
    assert not np.any(result[1:])


def test_read_csv_partial_numbers(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("1.5abc,text, 2e1\r\n")
    result = read_csv(path, 1, 3)
    assert result[0, 0] == 1.5
    assert result[0, 1] == 0.0
    assert result[0, 2] == 2e1


def test_read_csv_missing_file(tmp_path):
    result = read_csv(tmp_path / "absent.csv", 2, 2)
    assert result.shape == (2, 2)
    assert not np.any(result)