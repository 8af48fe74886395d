"""Report generator for recorded Mastermind games."""

import argparse
import json
import sys
from pathlib import Path
from datetime import datetime
from glob import glob
from typing import Optional
import pandas as pd
import matplotlib.pyplot as plt
import matplotlib
from tabulate import tabulate

# Use non-interactive backend for matplotlib
matplotlib.use('Agg')


def ruleset_label(config: dict) -> str:
    """Compact label for a configuration, e.g. '8c/5h/12g dup'."""
    label = f"{config['color_count']}c/{config['hole_count']}h/{config['guess_limit']}g"
    flags = []
    if config['duplicates_allowed']:
        flags.append('dup')
    if config['blanks_allowed']:
        flags.append('blank')
    return f"{label} {'+'.join(flags)}" if flags else label


def load_results(input_patterns: list[str], filter_outcome: Optional[str] = None) -> pd.DataFrame:
    """
    Load game records from JSONL files and return as DataFrame.

    Args:
        input_patterns: List of glob patterns for input files
        filter_outcome: Optional outcome filter (win/loss/quit)

    Returns:
        DataFrame with one flattened row per game
    """
    records = []

    for pattern in input_patterns:
        for file_path in sorted(glob(pattern)):
            try:
                with open(file_path, 'r') as f:
                    for line in f:
                        line = line.strip()
                        if not line:
                            continue
                        result = json.loads(line)
                        config = result['config']

                        record = {
                            'file': Path(file_path).name,
                            'ruleset': ruleset_label(config),
                            'outcome': result['outcome'],
                            'total_turns': result['total_turns'],
                            'duration_seconds': result['duration_seconds'],
                            'secret': str(result['secret']),
                            'color_count': config['color_count'],
                            'hole_count': config['hole_count'],
                            'guess_limit': config['guess_limit'],
                            'duplicates_allowed': config['duplicates_allowed'],
                            'blanks_allowed': config['blanks_allowed'],
                            'timestamp': result['timestamp'],
                        }

                        if filter_outcome and record['outcome'] != filter_outcome:
                            continue

                        records.append(record)

            except (OSError, ValueError, KeyError) as e:
                print(f"Warning: Failed to load {file_path}: {e}", file=sys.stderr)
                continue

    if not records:
        raise ValueError("No valid result records found")

    return pd.DataFrame(records)


def calculate_statistics(df: pd.DataFrame) -> pd.DataFrame:
    """
    Calculate aggregate statistics per ruleset.

    Returns:
        DataFrame with columns: ruleset, total_games, wins, losses, quits,
                                win_rate, avg_turns_when_won, min_turns,
                                max_turns, avg_duration
    """
    stats = []

    for ruleset in df['ruleset'].unique():
        ruleset_df = df[df['ruleset'] == ruleset]

        total_games = len(ruleset_df)
        wins = len(ruleset_df[ruleset_df['outcome'] == 'win'])
        losses = len(ruleset_df[ruleset_df['outcome'] == 'loss'])
        quits = len(ruleset_df[ruleset_df['outcome'] == 'quit'])

        # Only games that ended count toward the win rate
        finished = wins + losses
        win_rate = wins / finished if finished > 0 else 0

        win_df = ruleset_df[ruleset_df['outcome'] == 'win']
        avg_turns = win_df['total_turns'].mean() if len(win_df) > 0 else 0
        min_turns = int(win_df['total_turns'].min()) if len(win_df) > 0 else 0
        max_turns = int(win_df['total_turns'].max()) if len(win_df) > 0 else 0

        stats.append({
            'ruleset': ruleset,
            'total_games': total_games,
            'wins': wins,
            'losses': losses,
            'quits': quits,
            'win_rate': win_rate,
            'avg_turns_when_won': round(avg_turns, 2),
            'min_turns': min_turns,
            'max_turns': max_turns,
            'avg_duration': round(ruleset_df['duration_seconds'].mean(), 2),
        })

    stats_df = pd.DataFrame(stats)
    stats_df = stats_df.sort_values('win_rate', ascending=False)
    return stats_df


def generate_chart(df: pd.DataFrame, output_path: Path):
    """Save a histogram of turns needed to win, one series per ruleset."""
    plt.figure(figsize=(10, 6))
    win_df = df[df['outcome'] == 'win']
    if len(win_df) > 0:
        max_turns = int(win_df['total_turns'].max())
        bins = list(range(1, max_turns + 2))
        for ruleset in win_df['ruleset'].unique():
            turns = win_df[win_df['ruleset'] == ruleset]['total_turns']
            plt.hist(turns, bins=bins, alpha=0.6, label=ruleset, align='left')
        plt.legend()
    plt.xlabel('Turns to Win')
    plt.ylabel('Games')
    plt.title('Turns Needed to Crack the Code')
    plt.tight_layout()
    plt.savefig(output_path, dpi=100)
    plt.close()

    print(f"Chart saved to: {output_path}")


def generate_markdown_report(df: pd.DataFrame, stats_df: pd.DataFrame, output_path: Path):
    """Generate Markdown report."""

    md_content = f"""# Mastermind Results Report

**Generated:** {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}
**Total Games:** {len(df)}
**Rulesets Played:** {len(stats_df)}

## Summary Statistics

"""

    md_content += stats_df.to_markdown(index=False)

    md_content += f"""

## Overall Metrics

- **Total Games:** {len(df)}
- **Total Wins:** {stats_df['wins'].sum()}
- **Total Losses:** {stats_df['losses'].sum()}
- **Abandoned:** {stats_df['quits'].sum()}
"""

    with open(output_path, 'w') as f:
        f.write(md_content)

    print(f"Markdown report saved to: {output_path}")


def generate_csv_report(stats_df: pd.DataFrame, output_path: Path):
    """Generate CSV report."""
    stats_df.to_csv(output_path, index=False)
    print(f"CSV report saved to: {output_path}")


def generate_terminal_report(df: pd.DataFrame, stats_df: pd.DataFrame):
    """Print report to terminal."""

    print("\n" + "=" * 80)
    print("MASTERMIND RESULTS REPORT")
    print("=" * 80)
    print(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Total Games: {len(df)} | Rulesets: {len(stats_df)}")
    print("=" * 80)

    table_data = []
    for _, row in stats_df.iterrows():
        table_data.append([
            row['ruleset'],
            row['total_games'],
            row['wins'],
            row['losses'],
            row['quits'],
            f"{row['win_rate']*100:.1f}%",
            f"{row['avg_turns_when_won']:.1f}" if row['wins'] > 0 else '-',
            f"{row['min_turns']}-{row['max_turns']}" if row['wins'] > 0 else '-',
        ])

    headers = ['Ruleset', 'Games', 'Wins', 'Losses', 'Quit', 'Win Rate', 'Avg Turns', 'Min-Max']

    print(tabulate(table_data, headers=headers, tablefmt='grid'))
    print()


def main(argv=None):
    """Main reporter entry point."""
    parser = argparse.ArgumentParser(
        description="Generate reports from recorded Mastermind games",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Terminal summary of everything recorded so far
  python -m mastermind.reporter

  # All formats
  python -m mastermind.reporter --input "outputs/*.jsonl" \\
    --format terminal,markdown,csv,chart --output reports/weekly
        """
    )

    parser.add_argument('--input', type=str, action='append',
                        default=None,
                        help='Input glob pattern(s) for JSONL files (default: outputs/*.jsonl)')
    parser.add_argument('--format', type=str, default='terminal',
                        help='Output format(s): terminal,markdown,csv,chart (comma-separated, default: terminal)')
    parser.add_argument('--output', type=str, default=None,
                        help='Output basename (default: reports/report_TIMESTAMP)')
    parser.add_argument('--filter-outcome', type=str, choices=['win', 'loss', 'quit'],
                        help='Filter by outcome')

    args = parser.parse_args(argv)

    if args.input is None:
        args.input = ['outputs/*.jsonl']

    formats = [f.strip().lower() for f in args.format.split(',')]
    valid_formats = {'terminal', 'markdown', 'csv', 'chart'}
    invalid = set(formats) - valid_formats
    if invalid:
        parser.error(f"Invalid format(s): {', '.join(sorted(invalid))}")

    if args.output is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = Path(f"reports/report_{timestamp}")
    else:
        output_path = Path(args.output)

    try:
        df = load_results(args.input, args.filter_outcome)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Loaded {len(df)} game(s) from {len(df['file'].unique())} file(s)")

    stats_df = calculate_statistics(df)

    if set(formats) - {'terminal'}:
        output_path.parent.mkdir(parents=True, exist_ok=True)

    for fmt in formats:
        if fmt == 'markdown':
            generate_markdown_report(df, stats_df, output_path.with_suffix('.md'))
        elif fmt == 'csv':
            generate_csv_report(stats_df, output_path.with_suffix('.csv'))
        elif fmt == 'chart':
            generate_chart(df, output_path.with_suffix('.png'))
        elif fmt == 'terminal':
            generate_terminal_report(df, stats_df)


if __name__ == '__main__':
    main()
