"""
Payout domain service.

Computes pots, per-winner payouts and the ledger deltas a settlement applies.
"""

from dataclasses import dataclass

from domain.models.bet import Bet, OddsRatio
from domain.models.ledger import LedgerDelta
from domain.services.judging_service import Judgement


@dataclass(frozen=True)
class Payout:
    """Pot split for one settlement. remainder is the accepted rounding loss."""

    pot: int
    payout_per_winner: int
    winner_count: int
    remainder: int = 0

    @property
    def total_paid(self) -> int:
        return self.payout_per_winner * self.winner_count


class PayoutService:
    """
    Pure domain service for pot and payout math.

    All amounts are integers in the currency's smallest unit, so an uneven
    split truncates and the leftover cents are never redistributed.
    """

    def compute_pot(self, bet: Bet) -> int:
        """
        Total currency at stake.

        GROUP: wager_amount per participant.
        HEAD_TO_HEAD: the sum of both sides' stakes under the odds ratio
        (a flat doubling without one).
        """
        if bet.is_head_to_head:
            return self.head_to_head_pot(bet.wager_amount, bet.odds)
        return bet.wager_amount * len(bet.participants)

    @staticmethod
    def head_to_head_pot(wager_amount: int, odds: OddsRatio | None = None) -> int:
        odds = odds or OddsRatio()
        return wager_amount * (odds.challenger_share + odds.challengee_share)

    def compute_payout(self, bet: Bet, winners) -> Payout:
        """
        Split the pot evenly across winners.

        Args:
            bet: The bet being settled
            winners: Winner ids (empty on the void path)

        Returns:
            Payout with payout_per_winner * len(winners) <= pot
        """
        pot = self.compute_pot(bet)
        count = len(winners)
        if count == 0:
            return Payout(pot=pot, payout_per_winner=0, winner_count=0)
        per_winner, remainder = divmod(pot, count)
        return Payout(pot=pot, payout_per_winner=per_winner, winner_count=count, remainder=remainder)

    def build_ledger_deltas(self, bet: Bet, judgement: Judgement, payout: Payout) -> list[LedgerDelta]:
        """
        Ledger changes for every participant of a judged GROUP bet.

        Head-to-head bets and voids touch no group ledger.
        """
        if bet.is_head_to_head or judgement.is_void:
            return []

        winners = set(judgement.winners)
        deltas = []
        for user_id in sorted(bet.participants):
            if user_id in winners:
                deltas.append(LedgerDelta(user_id=user_id, balance=payout.payout_per_winner, wins=1, losses=0))
            else:
                deltas.append(LedgerDelta(user_id=user_id, balance=-bet.wager_amount, wins=0, losses=1))
        return deltas
