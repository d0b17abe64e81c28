# This file is part of qmaster, built on QuTiP: Quantum Toolbox in Python.
#
#    Copyright (c) 2011 and later, Paul D. Nation and Robert J. Johansson.
#    All rights reserved.
#
#    Redistribution and use in source and binary forms, with or without
#    modification, are permitted provided that the following conditions are
#    met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
#    3. Neither the name of the QuTiP: Quantum Toolbox in Python nor the names
#       of its contributors may be used to endorse or promote products derived
#       from this software without specific prior written permission.
#
#    THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
#    "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
#    LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A
#    PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT
#    HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL,
#    SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
#    LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE,
#    DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY
#    THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT
#    (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
#    OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
###############################################################################
"""
This module provides functions for parallel execution of loops and function
mappings, using the builtin Python module concurrent.futures.
"""

__all__ = ['parallel_map', 'serial_map']

import concurrent.futures
import os

from qmaster.settings import settings
from qmaster.ui.progressbar import make_progress_bar
from qmaster.logging_utils import get_logger

logger = get_logger(__name__)


def serial_map(task, values, task_args=tuple(), task_kwargs=None,
               progress_bar=None):
    """
    Serial mapping function with the same call signature as parallel_map, for
    easy switching between serial and parallel execution. This
    is functionally equivalent to::

        result = [task(value, *task_args, **task_kwargs) for value in values]

    This function work as a drop-in replacement of :func:`parallel_map`.

    Parameters
    ----------
    task : a Python function
        The function that is to be called for each value in ``values``.
    values : array / list
        The list or array of values for which the ``task`` function is to be
        evaluated.
    task_args : list / dictionary
        The optional additional argument to the ``task`` function.
    task_kwargs : list / dictionary
        The optional additional keyword argument to the ``task`` function.
    progress_bar : bool, str or :class:`qmaster.ui.BaseProgressBar`
        Progress bar updated after every finished task.

    Returns
    --------
    result : list
        The result list contains the value of
        ``task(value, *task_args, **task_kwargs)`` for each
        value in ``values``.
    """
    if task_kwargs is None:
        task_kwargs = {}
    values = list(values)
    progress_bar = make_progress_bar(progress_bar, len(values))
    results = []
    for n, value in enumerate(values):
        results.append(task(value, *task_args, **task_kwargs))
        progress_bar.update(n + 1)
    progress_bar.finished()
    return results


def parallel_map(task, values, task_args=tuple(), task_kwargs=None,
                 progress_bar=None, num_cpus=None):
    """
    Parallel execution of a mapping of `values` to the function `task`. This
    is functionally equivalent to::

        result = [task(value, *task_args, **task_kwargs) for value in values]

    `task`, its arguments and its return values must be picklable. The
    results are returned in the order of `values`. If a task raises, the
    pending tasks are cancelled and the first exception (in input order) is
    re-raised.

    Parameters
    ----------
    task : a Python function
        The function that is to be called for each value in ``values``.
    values : array / list
        The list or array of values for which the ``task`` function is to be
        evaluated.
    task_args : list / dictionary
        The optional additional argument to the ``task`` function.
    task_kwargs : list / dictionary
        The optional additional keyword argument to the ``task`` function.
    progress_bar : bool, str or :class:`qmaster.ui.BaseProgressBar`
        Progress bar updated after every finished task.
    num_cpus : int
        Number of worker processes. Defaults to ``settings.num_cpus``.

    Returns
    --------
    result : list
        The result list contains the value of
        ``task(value, *task_args, **task_kwargs)`` for
        each value in ``values``.
    """
    if task_kwargs is None:
        task_kwargs = {}
    if num_cpus is None:
        num_cpus = settings.num_cpus
    num_cpus = max(1, min(int(num_cpus), os.cpu_count() or 1))
    values = list(values)
    progress_bar = make_progress_bar(progress_bar, len(values))
    logger.debug("parallel_map: %d tasks on %d processes",
                 len(values), num_cpus)

    with concurrent.futures.ProcessPoolExecutor(max_workers=num_cpus) \
            as executor:
        futures = [executor.submit(task, value, *task_args, **task_kwargs)
                   for value in values]
        try:
            finished = 0
            for future in concurrent.futures.as_completed(futures):
                if future.exception() is not None:
                    break
                finished += 1
                progress_bar.update(finished)
        finally:
            for future in futures:
                future.cancel()

    progress_bar.finished()
    # first failing task in input order
    for future in futures:
        if not future.cancelled() and future.exception() is not None:
            raise future.exception()
    return [future.result() for future in futures]
