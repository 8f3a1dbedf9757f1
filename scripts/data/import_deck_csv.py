"""
Import flashcards from a CSV file into a stored deck collection.

This script:
1. Reads a CSV with 'front' and 'back' columns (optional 'difficulty')
2. Loads the collection stored under the given key
3. Creates a new deck and adds one card per row, skipping blank rows and
   repeated fronts
4. Saves the collection back (SQL database, or MongoDB with --mongo)

Usage:
    python -m scripts.data.import_deck_csv cards.csv --name "Travel" \
        --description "Phrases for the road" --language sk --category "Language Learning" \
        [--key default] [--mongo] [--dry-run]
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from flashdeck import config, deck_repo, sm2
from flashdeck.analytics import summarize_deck
from flashdeck.exceptions import InvalidInputError
from flashdeck.store import DeckStore


def read_cards(csv_path: Path) -> pd.DataFrame:
    """Read and clean card rows from CSV."""
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)

    missing = {"front", "back"} - set(df.columns)
    if missing:
        raise InvalidInputError(f"CSV is missing column(s): {', '.join(sorted(missing))}")

    if "difficulty" not in df.columns:
        df["difficulty"] = "medium"

    df["front"] = df["front"].str.strip()
    df["back"] = df["back"].str.strip()
    df["difficulty"] = df["difficulty"].str.strip().str.lower().replace("", "medium")

    df = df[(df["front"] != "") & (df["back"] != "")]
    return df.drop_duplicates(subset="front", keep="first").reset_index(drop=True)


def main():
    parser = argparse.ArgumentParser(description="Import flashcards from CSV")
    parser.add_argument("csv_path", type=Path, help="CSV file with front/back columns")
    parser.add_argument("--name", required=True, help="Name of the new deck")
    parser.add_argument("--description", required=True, help="Deck description")
    parser.add_argument("--language", choices=[lang.value for lang in sm2.DeckLanguage], default="en")
    parser.add_argument("--category", default="Language Learning")
    parser.add_argument("--key", default=None, help="Collection key (default: DEFAULT_COLLECTION_KEY)")
    parser.add_argument("--mongo", action="store_true", help="Store in MongoDB instead of the SQL database")
    parser.add_argument("--dry-run", action="store_true", help="Parse and report without saving")
    args = parser.parse_args()

    config.configure_logging()
    collection_key = args.key or config.get_default_collection_key()

    cards_df = read_cards(args.csv_path)
    print(f"Read {len(cards_df)} card(s) from {args.csv_path}")

    if args.mongo:
        decks = deck_repo.load_collection(collection_key)
    else:
        sm2.init_db()
        decks = sm2.load_collection(collection_key)

    store = DeckStore(decks)
    deck_id = store.create_deck(args.name, args.description, args.language, args.category)
    for row in cards_df.itertuples(index=False):
        store.add_card(deck_id, row.front, row.back, difficulty=row.difficulty)

    deck_progress = summarize_deck(store.get_deck(deck_id))
    print(f"Deck '{args.name}': {deck_progress.total_cards} card(s), all due now")

    if args.dry_run:
        print("\nDry run - nothing saved.")
        return

    if args.mongo:
        deck_repo.save_collection(collection_key, store.decks)
    else:
        sm2.save_collection(collection_key, store.decks)
    print(f"✓ Saved collection '{collection_key}' ({len(store.decks)} deck(s))")


if __name__ == "__main__":
    main()
