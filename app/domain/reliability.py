"""No-show strike bookkeeping, read side."""

from dataclasses import dataclass

# Users with this many strikes count as suspended even before the
# suspension row is written
SUSPENSION_STRIKES = 3


@dataclass
class ReliabilityRecord:
    user_id: str
    full_name: str | None
    strikes: int
    last_strike_date: str | None
    is_suspended: bool

    @property
    def at_risk(self) -> bool:
        """One more strike would suspend the user."""
        return not self.is_suspended and self.strikes == SUSPENSION_STRIKES - 1

    @classmethod
    def from_row(cls, row: dict) -> "ReliabilityRecord":
        strikes = int(row.get("no_show_strikes_count") or 0)
        return cls(
            user_id=str(row["user_id"]),
            full_name=row.get("full_name"),
            strikes=strikes,
            last_strike_date=row.get("last_strike_date"),
            is_suspended=bool(row.get("is_suspended")) or strikes >= SUSPENSION_STRIKES,
        )


def flagged_users(rows: list[dict]) -> list[ReliabilityRecord]:
    """Users with at least one strike, most recent strike first."""
    records = [ReliabilityRecord.from_row(r) for r in rows]
    records = [r for r in records if r.strikes > 0]
    # ISO timestamps sort lexically; users without a date go last
    records.sort(key=lambda r: r.last_strike_date or "", reverse=True)
    return records
