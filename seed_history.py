import json
import sys
import logging
from pathlib import Path
from typing import List

from google.cloud import firestore

from league_hub.config import DEFAULT_APP_ID, DashboardConfig
from league_hub.errors import SchemaError
from league_hub.schemas import HistoricalSeason
from league_hub.store import FirestoreLeagueStore, LeagueStore

logger = logging.getLogger(__name__)


def configure_logging(log_file: str):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def load_seasons(path: Path) -> List[HistoricalSeason]:
    """Read and validate season documents from a JSON file (one object or a list)"""
    with open(path, encoding='utf-8') as f:
        raw = json.load(f)

    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        raise SchemaError(f"{path}: expected a season object or a list of them")

    seasons = []
    seen_years = set()
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise SchemaError(f"{path}: entry {i} is not an object")
        season = HistoricalSeason.from_document(str(entry.get('year', i)), entry)
        if season.year in seen_years:
            raise SchemaError(f"{path}: year {season.year} appears more than once")
        seen_years.add(season.year)
        seasons.append(season)

    return seasons


def seed_history(store: LeagueStore, seasons: List[HistoricalSeason]) -> int:
    """Write each season under its year; existing seasons are replaced"""
    for season in seasons:
        doc_id = store.put_season(season)
        logger.info(f"Stored season {season.year} ({len(season.standings)} teams) as {doc_id}")
    return len(seasons)


def main():
    """Main execution function"""
    import argparse

    parser = argparse.ArgumentParser(description='Load historical league standings into Firestore')
    parser.add_argument('seasons_file', type=Path, help='JSON file with one or more season documents')
    parser.add_argument('--project', help='Google Cloud project id')
    parser.add_argument('--app-id', default=DEFAULT_APP_ID, help='Application id the data is namespaced under')
    parser.add_argument('--credentials', help='Service account JSON key file')
    parser.add_argument('--dry-run', action='store_true', help='Validate the file without writing')
    parser.add_argument('--log-file', default='seed_history.log', help='Log file path')

    args = parser.parse_args()
    configure_logging(args.log_file)

    try:
        seasons = load_seasons(args.seasons_file)
        logger.info(f"Loaded {len(seasons)} seasons from {args.seasons_file}")

        if args.dry_run:
            for season in seasons:
                logger.info(f"{season.year}: {len(season.standings)} teams, champion {season.championship_team or '-'}")
            return

        if args.credentials:
            client = firestore.Client.from_service_account_json(args.credentials, project=args.project)
        else:
            client = firestore.Client(project=args.project)

        config = DashboardConfig(app_id=args.app_id)
        store = FirestoreLeagueStore(client, config.data_root)
        try:
            count = seed_history(store, seasons)
        finally:
            store.close()

        print("\n" + "=" * 50)
        print(f"Seeded {count} seasons into {store.history_path}")
        print("=" * 50)

    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
