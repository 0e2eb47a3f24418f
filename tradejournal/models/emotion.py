"""Emotion tag and its colour/emoji lookup."""

from enum import Enum


class Emotion(str, Enum):
    """Emotional state recorded against a trade."""

    HAPPY = "happy"
    CONFIDENT = "confident"
    NEUTRAL = "neutral"
    ANXIOUS = "anxious"
    FEARFUL = "fearful"
    FRUSTRATED = "frustrated"
    GREEDY = "greedy"
    SAD = "sad"

    @classmethod
    def from_value(cls, value: "str | Emotion") -> "Emotion":
        """Resolve an emotion from its name or its emoji.

        Args:
            value: Emotion name (case-insensitive), emoji, or Emotion.

        Returns:
            The matching Emotion.

        Raises:
            ValueError: If nothing matches.
        """
        if isinstance(value, Emotion):
            return value
        text = str(value).strip()
        for emotion, (_, emoji) in EMOTION_STYLES.items():
            if text.lower() == emotion.value or text == emoji:
                return emotion
        raise ValueError(f"Unknown emotion: {value!r}")


# emotion -> (card colour, emoji)
EMOTION_STYLES: dict[Emotion, tuple[str, str]] = {
    Emotion.HAPPY: ("#FFE9A8", "😊"),
    Emotion.CONFIDENT: ("#C8E6C9", "😎"),
    Emotion.NEUTRAL: ("#E0E0E0", "😐"),
    Emotion.ANXIOUS: ("#FFD8B1", "😰"),
    Emotion.FEARFUL: ("#D1C4E9", "😨"),
    Emotion.FRUSTRATED: ("#FFCDD2", "😤"),
    Emotion.GREEDY: ("#B2EBF2", "🤑"),
    Emotion.SAD: ("#BBDEFB", "😢"),
}


def emotion_color(emotion: "str | Emotion") -> str:
    """Get the card colour for an emotion."""
    return EMOTION_STYLES[Emotion.from_value(emotion)][0]


def emotion_emoji(emotion: "str | Emotion") -> str:
    """Get the emoji for an emotion."""
    return EMOTION_STYLES[Emotion.from_value(emotion)][1]
