#cli.py

from __future__ import annotations

import os
import argparse
import logging

import numpy as np

from .current import c_rate_current
from .file_loader import load_parameters, save_results_csv, save_summary_json
from .model import SPM
from .simulator import simulate


def build_parser():
    ap = argparse.ArgumentParser(
        prog="spectral-spm",
        description="Constant-current simulation of the thermal single particle model.")
    ap.add_argument("--n", type=int, default=6, help="N + 1 Chebyshev nodes per half particle")
    ap.add_argument("--c-rate", type=float, default=1.0, help="C-rate, positive for discharge")
    ap.add_argument("--t-end", type=float, default=3600.0, help="final time [s]")
    ap.add_argument("--dt", type=float, default=10.0, help="sampling interval [s]")
    ap.add_argument("--v-min", type=float, default=None, help="lower cut-off voltage [V]")
    ap.add_argument("--v-max", type=float, default=None, help="upper cut-off voltage [V]")
    ap.add_argument("--method", type=str, default="BDF", help="solve_ivp method")
    ap.add_argument("--rtol", type=float, default=1e-6)
    ap.add_argument("--atol", type=float, default=1e-9)
    ap.add_argument("--params", type=str, default=None, help="CSV of parameter overrides (group,name,value)")
    ap.add_argument("--outdir", type=str, default="spm_out")
    ap.add_argument("--no-plots", action="store_true")
    ap.add_argument("--log-level", type=str, default="WARNING")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(levelname)s %(name)s: %(message)s")

    os.makedirs(args.outdir, exist_ok=True)

    params = load_parameters(args.params)
    print("[run] parameters:", args.params or "defaults")

    model = SPM(params, N=args.n, current=c_rate_current(args.c_rate, params.cell.C_nom))
    t_eval = np.arange(0.0, args.t_end + 0.5 * args.dt, args.dt)
    print(f"[run] {args.c_rate}C for up to {args.t_end:.0f} s, N = {args.n}, method = {args.method}")

    result = simulate(model, t_eval=t_eval, method=args.method, rtol=args.rtol, atol=args.atol,
                      V_min=args.v_min, V_max=args.v_max)
    series = result.series

    summary = series.summary()
    summary["terminated_by"] = result.terminated_by or "final time"
    summary["c_rate"] = args.c_rate
    summary["N"] = args.n
    print(f"[run] stopped at {summary['t_end']:.1f} s ({summary['terminated_by']}), "
          f"V = {summary['V_end']:.4f} V, T_max = {summary['T_max']:.2f} K")

    csv_path = save_results_csv(series, os.path.join(args.outdir, "results.csv"))
    print("[run] saved:", csv_path)
    summary_path = save_summary_json(summary, os.path.join(args.outdir, "summary.json"))
    print("[run] saved:", summary_path)

    if not args.no_plots:
        # Headless plotting
        import matplotlib
        matplotlib.use("Agg")
        from .plotting import save_result_plots

        for path in save_result_plots(series, params, args.outdir):
            print("[run] saved:", path)
    return summary


if __name__ == "__main__":
    main()
