import math

from studynow.schemas import Difficulty, ReviewFrequency

# Days until the next review, indexed by review count
BASE_INTERVALS = (1, 3, 7, 14, 30)

FREQUENCY_MULTIPLIERS = {
    ReviewFrequency.STANDARD: 1.0,
    ReviewFrequency.FREQUENT: 0.5,
    ReviewFrequency.INTENSIVE: 0.25,
}

# Harder topics come back sooner
DIFFICULTY_MULTIPLIERS = {
    Difficulty.EASY: 1.25,
    Difficulty.MEDIUM: 1.0,
    Difficulty.HARD: 0.75,
}


class IntervalModel:
    """
    Fixed-ladder review intervals scaled by topic difficulty and the user's
    review frequency preference.

    Counts outside the ladder are clamped instead of rejected, so every
    well-typed input yields an interval of at least one day.
    """
    
    @staticmethod
    def base_interval(review_count: int) -> int:
        """Ladder interval in days; counts past the end stay at the last step"""
        index = min(max(review_count, 0), len(BASE_INTERVALS) - 1)
        return BASE_INTERVALS[index]
    
    @staticmethod
    def effective_interval(
        review_count: int,
        difficulty: Difficulty,
        frequency: ReviewFrequency
    ) -> int:
        """
        Calculate the days until the next review.
        
        Args:
            review_count: Completed reviews, including the one just done
            difficulty: Topic difficulty (easy/medium/hard)
            frequency: User's review frequency preference
        
        Returns:
            Whole days, never less than 1
        """
        days = (
            IntervalModel.base_interval(review_count)
            * FREQUENCY_MULTIPLIERS[ReviewFrequency(frequency)]
            * DIFFICULTY_MULTIPLIERS[Difficulty(difficulty)]
        )
        # Halves round up: 10.5 days becomes 11
        return max(1, math.floor(days + 0.5))


base_interval = IntervalModel.base_interval
effective_interval = IntervalModel.effective_interval
