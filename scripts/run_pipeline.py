#!/usr/bin/env python3
"""
Master Pipeline Orchestration Script

Runs the complete crash injury pipeline:
1. Download recent crashes (bronze)
2. Clean and validate (silver)
3. Render exploratory charts
4. Train and evaluate the injury classifier

Usage:
    # Full pipeline
    python scripts/run_pipeline.py

    # Sample mode (for testing)
    python scripts/run_pipeline.py --limit 20000 --folds 3

    # Reuse the last download
    python scripts/run_pipeline.py --skip-download
"""

import sys
import argparse
from pathlib import Path
from datetime import datetime
import subprocess

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.append(str(PROJECT_ROOT))

from config.paths import ensure_directories
from config.settings import DEFAULT_YEARS_BACK, N_FOLDS


def print_header(text):
    """Print a formatted header"""
    print('\n' + '=' * 80)
    print(text.center(80))
    print('=' * 80 + '\n')


def run_command(cmd, description):
    """Run a command; True on success"""
    print(f'\n>>> {description}')
    print(f'Command: {" ".join(cmd)}')
    print()

    try:
        subprocess.run(cmd, check=True, cwd=PROJECT_ROOT)
        print(f'\n✓ {description} completed successfully')
        return True
    except subprocess.CalledProcessError as e:
        print(f'\n✗ {description} failed with exit code {e.returncode}')
        return False


def download_step(years_back, limit=None):
    print_header('STEP 1: DOWNLOAD CRASHES')
    cmd = [sys.executable, '-m', 'data_engineering.download.download_chicago_crashes',
           '--years-back', str(years_back)]
    if limit:
        cmd.extend(['--limit', str(limit)])
    return run_command(cmd, 'Crash download')


def clean_step():
    print_header('STEP 2: CLEAN CRASHES')
    cmd = [sys.executable, '-m', 'data_engineering.clean.clean_crashes']
    return run_command(cmd, 'Crash cleaning')


def explore_step():
    print_header('STEP 3: EXPLORATORY CHARTS')
    cmd = [sys.executable, '-m', 'analysis.explore_crashes']
    return run_command(cmd, 'Exploration report')


def train_step(folds, n_jobs, use_mlflow=False):
    print_header('STEP 4: TRAIN INJURY MODEL')
    cmd = [sys.executable, '-m', 'ml_engineering.train_injury_model',
           '--folds', str(folds), '--n-jobs', str(n_jobs)]
    if use_mlflow:
        cmd.append('--mlflow')
    return run_command(cmd, 'Model training')


def main(argv=None):
    """Main pipeline orchestration"""
    parser = argparse.ArgumentParser(
        description='Run the complete crash injury pipeline',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full pipeline
  python scripts/run_pipeline.py

  # Sample mode (for testing)
  python scripts/run_pipeline.py --limit 20000 --folds 3

  # Skip exploration, log to MLflow
  python scripts/run_pipeline.py --skip-explore --mlflow
        """
    )

    parser.add_argument('--years-back', type=int, default=DEFAULT_YEARS_BACK,
                        help='Lookback window in years')
    parser.add_argument('--limit', type=int,
                        help='Download only N records (for testing)')
    parser.add_argument('--folds', type=int, default=N_FOLDS,
                        help='Number of cross-validation folds')
    parser.add_argument('--n-jobs', type=int, default=-1,
                        help='Parallel fold fits (-1 = all cores)')
    parser.add_argument('--skip-download', action='store_true',
                        help='Reuse the latest bronze download')
    parser.add_argument('--skip-explore', action='store_true',
                        help='Skip exploratory charts')
    parser.add_argument('--mlflow', action='store_true',
                        help='Log the training run to MLflow')

    args = parser.parse_args(argv)

    print_header('CHICAGO CRASH INJURY - PIPELINE')
    print(f'Started: {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}')

    if args.limit:
        print(f'Mode: SAMPLE ({args.limit:,} records)')
    else:
        print(f'Mode: FULL ({args.years_back} years)')

    print('\nEnsuring directory structure...')
    ensure_directories()
    print('✓ Directory structure ready\n')

    start_time = datetime.now()

    steps = []
    if not args.skip_download:
        steps.append(lambda: download_step(args.years_back, args.limit))
    steps.append(clean_step)
    if not args.skip_explore:
        steps.append(explore_step)
    steps.append(lambda: train_step(args.folds, args.n_jobs, args.mlflow))

    # Stop at the first failed step
    success = all(step() for step in steps)

    end_time = datetime.now()

    print_header('PIPELINE SUMMARY')
    print(f'Started:  {start_time.strftime("%Y-%m-%d %H:%M:%S")}')
    print(f'Finished: {end_time.strftime("%Y-%m-%d %H:%M:%S")}')
    print(f'Duration: {end_time - start_time}')
    print()

    if success:
        print('✓ PIPELINE COMPLETED SUCCESSFULLY')
        print()
        print('Outputs:')
        print('  - Charts:  reports/figures/')
        print('  - Model:   models/artifacts/')
        print()
        return 0
    else:
        print('✗ PIPELINE ABORTED')
        print()
        print('Check the error messages above for details.')
        print()
        return 1


if __name__ == '__main__':
    sys.exit(main())
