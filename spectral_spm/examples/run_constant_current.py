import matplotlib.pyplot as plt
from spectral_spm.model import SPM
from spectral_spm.parameters import SPMParams
from spectral_spm.plotting import plot_concentration_profiles
from spectral_spm.simulator import simulate_constant_current

# 1C discharge of the default LCO cell, sampled every 10 s for one hour
params = SPMParams()
spm = SPM(params, N=6)
res = simulate_constant_current(1.0, 3600, model=spm, dt=10.0)
series = res.series

print(f"stopped at {series.time[-1]:.0f} s ({res.terminated_by or 'final time'})")

fig, (ax_v, ax_t) = plt.subplots(1, 2, figsize=(10, 4))
ax_v.plot(series.time, series.voltage, '.-')
ax_v.set_xlabel('Time [s]')
ax_v.set_ylabel('Voltage [V]')
ax_v.grid(True)
ax_t.plot(series.time, series.temperature, '.-')
ax_t.set_xlabel('Time [s]')
ax_t.set_ylabel('Temperature [K]')
ax_t.grid(True)

plot_concentration_profiles(series, params.neg.c_s_max, params.pos.c_s_max)
