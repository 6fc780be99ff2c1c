"""
speechfeat v1 CLI - Argument parsing and dispatch.

Responsibilities:
- Argument parsing
- Logging setup
- Loading configuration and audio
- Writing the feature document (JSON) and optional charts
- Printing success/errors
- Exit codes

Forbidden:
- No numeric processing (the pipeline owns it)
"""

import argparse
import logging
import sys
from pathlib import Path


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="speechfeat",
        description="speechfeat v1 command-line interface.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log pipeline progress to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command")

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract MFCC, pitch and voicing features from a WAV file.",
        description=(
            "Extract MFCC, pitch and voicing features from a mono WAV file.\n\n"
            "The audio is resampled to the configured sample rate if needed, split\n"
            "into frames and analyzed. The result is written as a JSON document\n"
            "with one MFCC row, one pitch value and one voicing flag per frame."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    extract_parser.add_argument(
        "--input",
        metavar="PATH",
        required=True,
        help="Path to input audio file (mono WAV).",
    )
    extract_parser.add_argument(
        "--config",
        metavar="PATH",
        help="JSON configuration file (default: built-in reference configuration).",
    )
    extract_parser.add_argument(
        "--window",
        choices=["hamming", "hanning"],
        help="Override the configured window type.",
    )
    extract_parser.add_argument(
        "--output",
        metavar="PATH",
        help="Write the feature document here instead of stdout.",
    )
    extract_parser.add_argument(
        "--plot-dir",
        metavar="DIR",
        help="Also render mfcc.png, pitch.png and voicing.png into DIR.",
    )

    subparsers.add_parser(
        "show-config",
        help="Print the reference configuration as JSON.",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_show_config(args: argparse.Namespace) -> int:
    """Handle the 'show-config' subcommand."""
    from speechfeat.config import default_config
    from speechfeat.utils import serialize_json

    sys.stdout.write(serialize_json(default_config().to_dict()))
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    """
    Handle the 'extract' subcommand.

    Returns exit code.
    """
    from speechfeat.audio import AudioFormatError, load_signal
    from speechfeat.config import ConfigurationError, default_config, load_config
    from speechfeat.pipeline import FeaturePipeline
    from speechfeat.stages.base import StageFailure
    from speechfeat.utils import build_feature_document, serialize_json

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1
    if not input_path.is_file():
        print(f"Error: Input path is not a file: {input_path}", file=sys.stderr)
        return 1

    try:
        config = load_config(Path(args.config)) if args.config else default_config()
        if args.window:
            config = config.replace(window_type=args.window)
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1
    except OSError as e:
        print(
            f"Error: Cannot read config file {args.config}: {e.strerror or e}",
            file=sys.stderr,
        )
        return 1
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        signal, source_rate = load_signal(input_path, config.sample_rate)
        features = FeaturePipeline(config).run(signal)
    except (AudioFormatError, ConfigurationError, StageFailure) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    document = build_feature_document(
        config=config,
        features=features,
        input_path=input_path,
        num_samples=len(signal),
        source_sample_rate=source_rate,
    )
    text = serialize_json(document)

    if args.plot_dir:
        from speechfeat.plotting import plot_features

        try:
            paths = plot_features(features, Path(args.plot_dir))
        except OSError as e:
            print(
                f"Error: Cannot write plots to {args.plot_dir}: {e.strerror or e}",
                file=sys.stderr,
            )
            return 1
        for path in paths:
            print(f"Wrote {path}", file=sys.stderr)

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text)
        except OSError as e:
            print(
                f"Error: Cannot write output {output_path}: {e.strerror or e}",
                file=sys.stderr,
            )
            return 1
        print(f"Wrote {features.num_frames} frames to {output_path}", file=sys.stderr)
    else:
        sys.stdout.write(text)

    return 0


def main() -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    configure_logging(args.verbose)

    if args.command == "extract":
        sys.exit(cmd_extract(args))
    if args.command == "show-config":
        sys.exit(cmd_show_config(args))
