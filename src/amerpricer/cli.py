import argparse
import sys

from .bbsr import price_bbsr
from .core import Contract, PUT, check_kind
from .errors import InvalidParameter, PricingError
from .log import setup_logging
from .lsmc import price_lsmc
from .validation import compare_engines


def _kind(s: str):
    try:
        return check_kind(s)
    except InvalidParameter as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def add_common(parser: argparse.ArgumentParser):
    parser.add_argument("--S0", type=float, required=True)
    parser.add_argument("--K", type=float, required=True)
    parser.add_argument("--T", type=float, required=True, help="years")
    parser.add_argument("--r", type=float, required=True, help="cont. risk-free")
    parser.add_argument("--sigma", type=float, required=True)
    parser.add_argument("--q", type=float, default=0.0, help="cont. dividend yield")
    parser.add_argument("--kind", type=_kind, default=PUT, help="call|put")


def add_lsmc(parser: argparse.ArgumentParser, steps_default: int):
    parser.add_argument("--paths", type=int, default=10_000)
    parser.add_argument("--lsmc-steps", dest="lsmc_steps", type=int, default=steps_default)
    parser.add_argument("--degree", type=int, default=2, help="regression polynomial order")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--basis", choices=("power", "laguerre"), default="power")


def _contract(args) -> Contract:
    return Contract(args.S0, args.K, args.T, args.r, args.sigma, args.q)


def cmd_lsmc(args):
    px, se = price_lsmc(
        _contract(args), args.paths, args.lsmc_steps, args.degree, args.seed,
        kind=args.kind, antithetic=args.antithetic, basis=args.basis,
        n_workers=args.workers, return_stderr=True,
    )
    print(f"{px:.10f}  (stderr {se:.10f})")


def cmd_bbsr(args):
    px = price_bbsr(_contract(args), args.steps, kind=args.kind, smoothing=args.smoothing)
    print(f"{px:.10f}")


def cmd_compare(args):
    res = compare_engines(
        _contract(args), args.kind,
        path_count=args.paths, lsmc_steps=args.lsmc_steps,
        regressor_degree=args.degree, seed=args.seed,
        step_count=args.steps, smoothing=args.smoothing,
    )
    px, se = res["lsmc"]
    print(f"lsmc       {px:.10f}  (stderr {se:.10f})")
    print(f"bbsr       {res['bbsr']:.10f}")
    print(f"european   {res['european']:.10f}")
    print(f"premium    {res['early_exercise_premium']:.10f}")
    print(f"gap        {res['discrepancy']:.10f}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="amerpricer", description="American option pricing CLI")
    p.add_argument("--log-level", dest="log_level", default="WARNING",
                   help="DEBUG|INFO|WARNING|ERROR")
    sub = p.add_subparsers(dest="cmd", required=True)

    # LSMC
    p_lsmc = sub.add_parser("lsmc", help="Least-Squares Monte Carlo price")
    add_common(p_lsmc)
    add_lsmc(p_lsmc, steps_default=50)
    p_lsmc.add_argument("--antithetic", action="store_true")
    p_lsmc.add_argument("--workers", type=int, default=1)
    p_lsmc.set_defaults(func=cmd_lsmc)

    # BBSR
    p_bbsr = sub.add_parser("bbsr", help="Binomial Black-Scholes with Richardson extrapolation")
    add_common(p_bbsr)
    p_bbsr.add_argument("--steps", type=int, default=500)
    p_bbsr.add_argument("--smoothing", action="store_true",
                        help="Black-Scholes values at the last step")
    p_bbsr.set_defaults(func=cmd_bbsr)

    # Both engines side by side
    p_cmp = sub.add_parser("compare", help="LSMC vs BBSR vs European")
    add_common(p_cmp)
    add_lsmc(p_cmp, steps_default=50)
    p_cmp.add_argument("--steps", type=int, default=500)
    p_cmp.add_argument("--smoothing", action="store_true")
    p_cmp.set_defaults(func=cmd_compare)
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    try:
        setup_logging(args.log_level)
    except ValueError as e:
        p.error(str(e))
    try:
        args.func(args)
    except PricingError as e:
        print(f"amerpricer: error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
