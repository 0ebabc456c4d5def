import sys
from pathlib import Path

# Ensure project src is on sys.path
repo_root = Path(__file__).resolve().parents[1]
src_dir = repo_root / 'src'
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from TutorDesk.data import create_tables, fetch_schedules, fetch_teachers  # noqa: E402
from TutorDesk.paths import get_db_path  # noqa: E402

if __name__ == '__main__':
    print(f'Running smoke check against {get_db_path()}: create_tables()...')
    create_tables()
    print(f'{len(fetch_teachers())} teachers, {len(fetch_schedules())} sessions.')
    print('Smoke check completed.')
