"""Text-to-speech voice models returned by /voices."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, RootModel


class VoiceGender(str, Enum):
    FEMALE = "female"
    MALE = "male"
    NEUTRAL = "neutral"
    NONBINARY = "nonbinary"


class Voice(BaseModel):
    """A synthesis voice."""

    name: str
    locale: str
    gender: str
    styles: List[str] = Field(default_factory=list)
    supported_features: List[str] = Field(default_factory=list)

    def supports_feature(self, feature: str) -> bool:
        return feature in self.supported_features

    def supports_style(self, style: str) -> bool:
        return style in self.styles

    def gender_enum(self) -> Optional[VoiceGender]:
        """Gender as an enum, or None for values this client does not know."""
        try:
            return VoiceGender(self.gender)
        except ValueError:
            return None

    def is_locale(self, locale: str) -> bool:
        return self.locale == locale


class VoicesResponse(RootModel[Dict[str, List[Voice]]]):
    """Voices grouped by locale, as returned by GET /voices."""

    def all_voices(self) -> List[Voice]:
        return [voice for voices in self.root.values() for voice in voices]

    def voices_for_locale(self, locale: str) -> Optional[List[Voice]]:
        return self.root.get(locale)

    def locales(self) -> List[str]:
        return list(self.root.keys())
