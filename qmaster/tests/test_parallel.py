import numpy as np
import pytest
from numpy.testing import assert_

from qmaster.parallel import parallel_map, serial_map
from qmaster.ui.progressbar import BaseProgressBar


def test_parallel_map():
    "parallel_map"

    x = np.arange(10)
    y1 = [pow(int(xx), 2, 7) for xx in x]

    y2 = parallel_map(pow, [int(xx) for xx in x], (2, 7), num_cpus=1)
    assert_((np.array(y1) == np.array(y2)).all())

    y2 = parallel_map(pow, [int(xx) for xx in x], (2, 7), num_cpus=2)
    assert_((np.array(y1) == np.array(y2)).all())


def test_serial_map():
    "serial_map"

    kwargs = {'base': 16}
    values = ['a', 'ff', '10']
    assert serial_map(int, values, task_kwargs=kwargs) == [10, 255, 16]


def test_parallel_map_kwargs():
    values = ['a', 'ff', '10']
    assert parallel_map(int, values, task_kwargs={'base': 16},
                        num_cpus=2) == [10, 255, 16]


def test_parallel_map_preserves_order():
    values = list(range(20, 0, -1))
    assert parallel_map(abs, values, num_cpus=3) == values


def test_parallel_map_raises_first_error():
    with pytest.raises(ValueError):
        parallel_map(int, ['1', 'x', '3'], num_cpus=2)


def test_serial_map_raises():
    with pytest.raises(ValueError):
        serial_map(int, ['1', 'x', '3'])


@pytest.mark.parametrize("map_func", [serial_map, parallel_map])
def test_progress_bar_updated(map_func):
    pbar = BaseProgressBar()
    map_func(abs, [-1, -2, -3, -4], progress_bar=pbar)
    assert pbar.n == 4
    assert pbar.t_done is not None


def test_empty_values():
    assert serial_map(abs, []) == []
    assert parallel_map(abs, [], num_cpus=2) == []
