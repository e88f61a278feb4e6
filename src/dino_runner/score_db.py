"""
score_db.py: Database layer for high-score persistence.
"""

import logging
import sqlite3

logger = logging.getLogger(__name__)

DB_FILE = "dino_runner.db"


class HighScoreStore:
    """
    Handles all interaction with the SQLite database.
    Never raises: a broken database reads as 0 and drops writes.
    """
    def __init__(self, db_file: str = DB_FILE):
        self.db_file = db_file
        self.conn = None
        try:
            self.conn = sqlite3.connect(db_file)
            self.setup()
        except sqlite3.Error as e:
            logger.error("High score database unavailable (%s): %s", db_file, e)
            self.conn = None

    def setup(self):
        """Creates the table and its single row if they don't exist."""
        cur = self.conn.cursor()
        cur.execute("""
            CREATE TABLE IF NOT EXISTS HighScores (
                id INTEGER PRIMARY KEY,
                best INTEGER DEFAULT 0
            )
        """)
        cur.execute("INSERT OR IGNORE INTO HighScores (id, best) VALUES (1, 0)")
        self.conn.commit()

    def load(self) -> int:
        """Fetches the best score, 0 when absent or unreadable."""
        if self.conn is None:
            return 0
        try:
            row = self.conn.execute("SELECT best FROM HighScores WHERE id=1").fetchone()
        except sqlite3.Error as e:
            logger.warning("Could not read high score: %s", e)
            return 0
        return int(row[0]) if row and row[0] is not None else 0

    def save(self, score: int):
        """Stores the score if it beats the stored best."""
        if self.conn is None:
            return
        try:
            self.conn.execute(
                "UPDATE HighScores SET best = MAX(best, ?) WHERE id=1", (int(score),))
            self.conn.commit()
        except sqlite3.Error as e:
            logger.warning("Could not save high score %d: %s", score, e)

    def close(self):
        if self.conn is not None:
            self.conn.close()
            self.conn = None
