"""
Sideband cooling of a mechanical oscillator in a driven optomechanical cavity.

Plots the photon and phonon numbers of a cavity red detuned by one mechanical
frequency, starting from two phonons, and the steady-state phonon number as
a function of the detuning for mechanics coupled to a warm bath.
"""
import numpy as np
import matplotlib.pyplot as plt

from qmaster import (OptomechanicalParameters, sideband_cooling,
                     detuning_scan, file_data_store)

params = OptomechanicalParameters()         # omega_m = 10, delta = -10
warm = params.replace(damping=0.03, n_th=2.0)
tlist = np.linspace(0, 50, 501)
detunings = np.linspace(-13, -7, 25)


def main():
    result = sideband_cooling(params, tlist, n_photons=0, n_phonons=2,
                              progress_bar=True)
    n_a, n_b = result.expect
    print('Phonon number at t = %g: %.4f' % (tlist[-1], n_b[-1]))
    file_data_store('sideband_cooling.dat',
                    np.column_stack([tlist, n_a, n_b]), numtype='real')

    # every detuning is solved in its own process
    ss_a, ss_b = detuning_scan(warm, detunings, parallel=True,
                               progress_bar=True)
    print('Coldest mechanics at delta = %g' % detunings[np.argmin(ss_b)])

    fig, axes = plt.subplots(1, 2, figsize=(10, 4))
    axes[0].plot(tlist, n_a, label=r'$\langle a^\dagger a\rangle$')
    axes[0].plot(tlist, n_b, label=r'$\langle b^\dagger b\rangle$')
    axes[0].set_xlabel('Time')
    axes[0].set_ylabel('Occupation')
    axes[0].legend()

    axes[1].semilogy(detunings, ss_b, 'o-', label='mechanics')
    axes[1].semilogy(detunings, ss_a, 's-', label='cavity')
    axes[1].axvline(-warm.omega_m, color='k', ls='--')
    axes[1].set_xlabel(r'Detuning $\Delta$')
    axes[1].set_ylabel('Steady-state occupation')
    axes[1].legend()

    fig.tight_layout()
    plt.show()


if __name__ == '__main__':
    main()
