__all__ = ['BaseProgressBar', 'TextProgressBar', 'EnhancedTextProgressBar',
           'make_progress_bar']

import time
import datetime
import sys


class BaseProgressBar(object):
    """
    A silent progress bar that only keeps time. Solvers call ``start`` once,
    ``update`` after every completed step and ``finished`` at the end.

    Example usage:

        detunings = linspace(-13, -7, 25)
        pbar = TextProgressBar(len(detunings))
        for n, delta in enumerate(detunings):
            solve_for(delta)
            pbar.update(n + 1)
        pbar.finished()

    """

    def __init__(self, iterations=0, chunk_size=10):
        self.start(iterations, chunk_size)

    def start(self, iterations, chunk_size=10):
        self.N = float(iterations)
        self.n = 0
        self.p_chunk_size = chunk_size
        self.p_chunk = chunk_size
        self.t_start = time.time()
        self.t_done = None

    def update(self, n):
        self.n = n

    def percent_done(self):
        if self.N <= 0:
            return 100.0
        return (self.n / self.N) * 100.0

    def time_elapsed(self):
        return "%6.2fs" % (time.time() - self.t_start)

    def time_remaining_est(self, p):
        if p > 0.0:
            t_r_est = (time.time() - self.t_start) * (100.0 - p) / p
        else:
            t_r_est = 0

        dd = datetime.datetime(1, 1, 1) + datetime.timedelta(seconds=t_r_est)
        time_string = "%02d:%02d:%02d:%02d" % \
            (dd.day - 1, dd.hour, dd.minute, dd.second)

        return time_string

    def finished(self):
        self.t_done = time.time()


class TextProgressBar(BaseProgressBar):
    """
    Prints the percentage done, run time and estimated remaining time every
    ``chunk_size`` percent.
    """

    def __init__(self, iterations=0, chunk_size=10, stream=None):
        self.stream = stream
        super(TextProgressBar, self).__init__(iterations, chunk_size)

    def _write(self, text, end="\n"):
        out = self.stream if self.stream is not None else sys.stdout
        out.write(text + end)
        out.flush()

    def update(self, n):
        super(TextProgressBar, self).update(n)
        p = self.percent_done()
        if p >= self.p_chunk:
            self._write("%4.1f%%." % p +
                        " Run time: %s." % self.time_elapsed() +
                        " Est. time left: %s" % self.time_remaining_est(p))
            while self.p_chunk <= p:
                self.p_chunk += self.p_chunk_size

    def finished(self):
        super(TextProgressBar, self).finished()
        self._write("Total run time: %s" % self.time_elapsed())


class EnhancedTextProgressBar(TextProgressBar):
    """
    A single-line text progress bar redrawn in place.
    """

    fill_char = '*'
    width = 25

    def update(self, n):
        self.n = n
        percent_done = int(round(self.percent_done()))
        all_full = self.width - 2
        num_hashes = int(round((percent_done / 100.0) * all_full))
        prog_bar = ('[' + self.fill_char * num_hashes +
                    ' ' * (all_full - num_hashes) + ']')
        pct_place = (len(prog_bar) // 2) - len(str(percent_done))
        pct_string = '%d%%' % percent_done
        prog_bar = (prog_bar[0:pct_place] +
                    (pct_string + prog_bar[pct_place + len(pct_string):]))
        prog_bar += ' Elapsed %s / Remaining %s' % (
            self.time_elapsed().strip(),
            self.time_remaining_est(percent_done))
        self._write('\r ' + prog_bar, end='')

    def finished(self):
        BaseProgressBar.finished(self)
        self._write("\r Total run time: %s" % self.time_elapsed())


_progress_bars = {
    'text': TextProgressBar,
    'enhanced': EnhancedTextProgressBar,
}


def make_progress_bar(progress_bar, iterations=0):
    """
    Resolve the ``progress_bar`` argument accepted by solvers and maps.

    ``None`` or ``False`` give a silent bar, ``True`` a
    :class:`TextProgressBar`, a string one of ``'text'`` or ``'enhanced'``.
    Instances of :class:`BaseProgressBar` are used as given.
    """
    if progress_bar is None or progress_bar is False:
        return BaseProgressBar(iterations)
    if progress_bar is True:
        return TextProgressBar(iterations)
    if isinstance(progress_bar, str):
        try:
            return _progress_bars[progress_bar](iterations)
        except KeyError:
            raise ValueError("Unknown progress bar %r, expected one of %s"
                             % (progress_bar, sorted(_progress_bars)))
    if isinstance(progress_bar, BaseProgressBar):
        progress_bar.start(iterations)
        return progress_bar
    raise TypeError("progress_bar must be a bool, a string or a "
                    "BaseProgressBar instance")
