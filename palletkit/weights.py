"""Call weights for the block reward and collator selection pallets."""

from __future__ import annotations

from dataclasses import dataclass

WEIGHT_MAX = 2**64 - 1


def _saturate(value: int) -> int:
    return min(value, WEIGHT_MAX)


@dataclass(frozen=True)
class DbWeight:
    """Cost of a single database read and write."""

    read: int
    write: int

    def reads(self, n: int) -> int:
        return _saturate(self.read * n)

    def writes(self, n: int) -> int:
        return _saturate(self.write * n)


ROCKS_DB_WEIGHT = DbWeight(read=25_000_000, write=100_000_000)


def set_configuration(db: DbWeight = ROCKS_DB_WEIGHT) -> int:
    return db.writes(1)


def set_invulnerables(b: int, db: DbWeight = ROCKS_DB_WEIGHT) -> int:
    return _saturate(18_563_000 + 68_000 * b + db.writes(1))


def set_desired_candidates(db: DbWeight = ROCKS_DB_WEIGHT) -> int:
    return _saturate(16_363_000 + db.writes(1))


def set_candidacy_bond(db: DbWeight = ROCKS_DB_WEIGHT) -> int:
    return _saturate(16_840_000 + db.writes(1))


def register_as_candidate(c: int, db: DbWeight = ROCKS_DB_WEIGHT) -> int:
    return _saturate(71_196_000 + 198_000 * c + db.reads(4) + db.writes(2))


def leave_intent(c: int, db: DbWeight = ROCKS_DB_WEIGHT) -> int:
    return _saturate(55_336_000 + 151_000 * c + db.reads(1) + db.writes(2))


def note_author(db: DbWeight = ROCKS_DB_WEIGHT) -> int:
    return _saturate(71_461_000 + db.reads(3) + db.writes(4))


def new_session(r: int, c: int, db: DbWeight = ROCKS_DB_WEIGHT) -> int:
    return _saturate(
        109_961_000 * r
        + 151_952_000 * c
        + db.reads(r)
        + db.reads(2 * c)
        + db.writes(2 * r)
        + db.writes(2 * c)
    )