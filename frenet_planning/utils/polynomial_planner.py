import numpy as np
from numpy.polynomial import polynomial as P


class BoundaryPolynomial(object):
    """
    Polynomial in time fitted to boundary conditions, coefficients stored in ascending order.
    """

    def __init__(self, x0, v0, a0, time):
        if not time > 0.0:
            raise ValueError("The duration of a boundary polynomial must be positive, got {}".format(time))
        self.time = time
        # The start state fixes the three lowest-order coefficients directly
        self.coef = np.array([x0, v0, a0 / 2.0], dtype=float)

    def _derivative(self, t, order):
        coef = P.polyder(self.coef, order) if order > 0 else self.coef
        return P.polyval(t, coef)

    def calc_point(self, t):
        return self._derivative(t, 0)

    def calc_first_derivative(self, t):
        return self._derivative(t, 1)

    def calc_second_derivative(self, t):
        return self._derivative(t, 2)

    def calc_third_derivative(self, t):
        return self._derivative(t, 3)


class QuinticPolynomial(BoundaryPolynomial):
    """
    Quintic Polynomial class
    """

    def __init__(self, x0, v0, a0, x1, v1, a1, time):
        super().__init__(x0, v0, a0, time)
        c0, c1, c2 = self.coef

        # Remaining coefficients a3, a4, a5 from the end position, velocity and acceleration
        A = np.array([[time ** 3, time ** 4, time ** 5],
                      [3 * time ** 2, 4 * time ** 3, 5 * time ** 4],
                      [6 * time, 12 * time ** 2, 20 * time ** 3]])
        b = np.array([x1 - c0 - c1 * time - c2 * time ** 2,
                      v1 - c1 - 2 * c2 * time,
                      a1 - 2 * c2])
        self.coef = np.concatenate((self.coef, np.linalg.solve(A, b)))

    @classmethod
    def from_states(cls, start_state, end_state):
        """
        Lateral polynomial from start_state to end_state over the end state's horizon.
        """
        return cls(start_state.d, start_state.d_d, start_state.d_dd,
                   end_state.d, end_state.d_d, end_state.d_dd, end_state.T)


class QuarticPolynomial(BoundaryPolynomial):
    """
    Quartic Polynomial class, the end position is left free.
    """

    def __init__(self, x0, v0, a0, v1, a1, time):
        super().__init__(x0, v0, a0, time)
        _, c1, c2 = self.coef

        A = np.array([[3 * time ** 2, 4 * time ** 3],
                      [6 * time, 12 * time ** 2]])
        b = np.array([v1 - c1 - 2 * c2 * time,
                      a1 - 2 * c2])
        self.coef = np.concatenate((self.coef, np.linalg.solve(A, b)))

    @classmethod
    def from_states(cls, start_state, end_state):
        # Longitudinal start acceleration is always planned from zero
        return cls(start_state.s, start_state.s_d, 0.0,
                   end_state.s_d, end_state.s_dd, end_state.T)
