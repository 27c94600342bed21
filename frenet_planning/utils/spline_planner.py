import numpy as np


class CubicSpline:
    """
    Natural cubic spline x(t) through (t_seq, x), implemented by Numpy.

    Evaluation outside [t_seq[0], t_seq[-1]] is clamped to the nearest end of the domain,
    the spline is never extrapolated.
    """

    def __init__(self, t_seq, x):
        self.t_seq = np.asarray(t_seq, dtype=float)
        self.a = np.asarray(x, dtype=float)

        self.nt = len(self.t_seq)  # dimension of input
        if self.nt < 2 or self.a.shape != self.t_seq.shape:
            raise ValueError("A cubic spline needs at least 2 knots with one value per knot")
        h = np.diff(self.t_seq)
        if np.any(h <= 0.0):
            raise ValueError("The knots of a cubic spline must be strictly increasing")

        # calc spline coefficient c
        self.c = np.linalg.solve(self.__calc_A(h), self.__calc_B(h))

        # calc spline coefficient b, d (one per segment)
        self.d = np.diff(self.c) / (3.0 * h)
        self.b = np.diff(self.a) / h - h * (self.c[1:] + 2 * self.c[:-1]) / 3.0

    def __calc_A(self, h):
        """
        calc matrix A for spline coefficient c, natural end conditions on the first and last rows
        """
        A = np.zeros((self.nt, self.nt))
        A[0, 0] = 1.0
        A[-1, -1] = 1.0
        for i in range(1, self.nt - 1):
            A[i, i - 1] = h[i - 1]
            A[i, i] = 2.0 * (h[i - 1] + h[i])
            A[i, i + 1] = h[i]
        return A

    def __calc_B(self, h):
        """
        calc vector B for spline coefficient c
        """
        B = np.zeros(self.nt)
        slopes = np.diff(self.a) / h
        B[1:-1] = 3.0 * (slopes[1:] - slopes[:-1])
        return B

    @property
    def t_max(self):
        return self.t_seq[-1]

    def calc_interval_indice(self, t):
        """
        Index of the segment holding t, i.e. the largest knot t_i <= t, limited to the last segment.
        """
        indice = np.searchsorted(self.t_seq, t, side="right") - 1
        return np.clip(indice, 0, self.nt - 2)

    def _locate(self, t, given_indice=None):
        t = np.clip(t, self.t_seq[0], self.t_seq[-1])
        indice = self.calc_interval_indice(t) if given_indice is None else given_indice
        return indice, t - self.t_seq[indice]

    def calc_point(self, t, given_indice=None):
        indice, dx = self._locate(t, given_indice)
        return self.a[indice] + self.b[indice] * dx + self.c[indice] * dx ** 2 + self.d[indice] * dx ** 3

    def calc_first_derivative(self, t, given_indice=None):
        indice, dx = self._locate(t, given_indice)
        return self.b[indice] + 2.0 * self.c[indice] * dx + 3.0 * self.d[indice] * dx ** 2

    def calc_second_derivative(self, t, given_indice=None):
        indice, dx = self._locate(t, given_indice)
        return 2.0 * self.c[indice] + 6.0 * self.d[indice] * dx


class CubicSpline2D:
    """
    2D Cubic Spline class, x(s) and y(s) share the chord-length parameter s.
    """

    def __init__(self, x, y):
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if len(x) < 2 or len(x) != len(y):
            raise ValueError("At least 2 waypoints with matching x and y are required, got {} and {}"
                             .format(len(x), len(y)))
        # treat x, y as function of arc length s independently.
        self.s = self.__calc_s(x, y)
        self.sx = CubicSpline(self.s, x)
        self.sy = CubicSpline(self.s, y)

    def __calc_s(self, x, y):
        # calc the arc length along the lane
        self.ds = np.hypot(np.diff(x), np.diff(y))
        return np.append(0.0, np.cumsum(self.ds))

    @property
    def s_max(self):
        return self.s[-1]

    def in_range(self, s):
        return (s >= self.s[0]) & (s <= self.s[-1])

    def calc_position(self, s):
        x = self.sx.calc_point(s)
        y = self.sy.calc_point(s)
        return x, y

    def calc_yaw(self, s):
        x_d = self.sx.calc_first_derivative(s)
        y_d = self.sy.calc_first_derivative(s)
        return np.arctan2(y_d, x_d)

    def calc_curvature(self, s):
        """
        signed curvature, positive when the curve turns left
        """
        x_d = self.sx.calc_first_derivative(s)
        x_dd = self.sx.calc_second_derivative(s)
        y_d = self.sy.calc_first_derivative(s)
        y_dd = self.sy.calc_second_derivative(s)
        return (y_dd * x_d - x_dd * y_d) / ((x_d ** 2 + y_d ** 2) ** (3 / 2))

    def calc_all_in_single_forward(self, s):
        """
        calc (x, y, yaw, kappa) sharing one segment lookup.
        Args:
            s - float / np.ndarray: the arc length along the centerline
        """
        # sx and sy share their knots, so the segment indices are computed once
        s = np.clip(s, self.s[0], self.s[-1])
        indices_of_s = self.sx.calc_interval_indice(s)

        x = self.sx.calc_point(s, indices_of_s)
        x_d = self.sx.calc_first_derivative(s, indices_of_s)
        x_dd = self.sx.calc_second_derivative(s, indices_of_s)

        y = self.sy.calc_point(s, indices_of_s)
        y_d = self.sy.calc_first_derivative(s, indices_of_s)
        y_dd = self.sy.calc_second_derivative(s, indices_of_s)

        yaw = np.arctan2(y_d, x_d)
        kappa = (y_dd * x_d - x_dd * y_d) / ((x_d ** 2 + y_d ** 2) ** (3 / 2))
        return x, y, yaw, kappa


def calc_spline_course(x, y, ds=0.1):
    """
    calc the x, y, yaw, curvature
    along the road where the arc length is discretized by ds
    """
    course = CubicSpline2D(x, y)
    rs = np.arange(0, course.s[-1], ds)
    rx, ry, ryaw, rk = course.calc_all_in_single_forward(rs)

    return rs, rx, ry, ryaw, rk
