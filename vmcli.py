"""Command line entry points: vmsim, vmgen and vmstats"""

import argparse
import sys
from typing import List, Optional

import matplotlib.pyplot as plt

from references import generate_reference_string, load_reference_string, save_reference_string
from virtualsim import ALGORITHMS, MAX_FRAMES, MAX_PAGE_RANGE, SimulationError, VirtualMemorySimulator, format_step
from vmstats import RATES_FILE, plot_miss_rates, run_sweep, write_rates


def vmsim_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vmsim", description="Simulate page replacement for one algorithm")
    parser.add_argument("num_frames", type=int,
                        help=f"Number of physical memory frames (1-{MAX_FRAMES})")
    parser.add_argument("input_file", help="File containing page reference sequence")
    parser.add_argument("algorithm", help=f"Page replacement algorithm ({', '.join(ALGORITHMS)})")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only print the miss rate, not the frame contents at each step")
    return parser


def vmgen_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vmgen", description="Generate a random page reference sequence")
    parser.add_argument("range", type=int, help=f"Range of page references (1-{MAX_PAGE_RANGE})")
    parser.add_argument("length", type=int, help="Length of the sequence")
    parser.add_argument("output_file", help="Output filename to store the generated sequence")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    return parser


def vmstats_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vmstats", description="Compare miss rates of opt, lru and fifo across frame counts")
    parser.add_argument("min_frames", type=int, help="Minimum number of frames")
    parser.add_argument("max_frames", type=int, help=f"Maximum number of frames (no more than {MAX_FRAMES})")
    parser.add_argument("frame_increment", type=int, help="Frame number increment (positive)")
    parser.add_argument("input_file", help="Input filename containing the references")
    parser.add_argument("--output", "-o", default=RATES_FILE, help="Results table file")
    parser.add_argument("--plot", default=None, help="Also save a miss rate chart to this image file")
    return parser


def vmsim_main(argv: Optional[List[str]] = None) -> int:
    args = vmsim_parser().parse_args(argv)
    try:
        simulator = VirtualMemorySimulator(args.num_frames)
        reference_string = load_reference_string(args.input_file)
        print(f"Page references read from {args.input_file}")
        print(f"Number of frames: {args.num_frames}")
        print(f"Algorithm: {args.algorithm}")
        result = simulator.run(reference_string, args.algorithm, trace=not args.quiet)
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for record in result.steps:
        print(format_step(record))
    print(f"\n{result.summary()}")
    return 0


def vmgen_main(argv: Optional[List[str]] = None) -> int:
    args = vmgen_parser().parse_args(argv)
    try:
        reference_string = generate_reference_string(args.range, args.length, seed=args.seed)
        save_reference_string(args.output_file, reference_string)
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Page reference sequence generated and stored in {args.output_file}")
    return 0


def vmstats_main(argv: Optional[List[str]] = None) -> int:
    args = vmstats_parser().parse_args(argv)
    print("Running simulation...")
    try:
        reference_string = load_reference_string(args.input_file)
        sweep = run_sweep(reference_string, args.min_frames, args.max_frames, args.frame_increment)
        for algorithm, row in sweep.rows():
            for num_frames, miss_rate in zip(sweep.frame_counts, row):
                print(f"{algorithm}, {num_frames} frames: Miss rate = {miss_rate:.2f}%")
        # Chart first, so a failed save leaves no results table behind
        if args.plot:
            plt.switch_backend("Agg")
            plot_miss_rates(sweep, args.plot)
        write_rates(sweep, args.output)
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Simulation completed. Results written to {args.output}")
    if args.plot:
        print(f"Graph saved as '{args.plot}'")
    return 0


if __name__ == "__main__":
    sys.exit(vmsim_main())
