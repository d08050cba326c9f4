from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from hero_server.data_models.leaderboard import LevelCompletion


class ScoreSubmission(BaseModel):
    """Body of POST /score/submit."""
    userId: str = Field(min_length=1)
    username: str
    avatarUrl: Optional[str] = ''
    levelNumber: int
    alliesSaved: int
    timeSpent: float
    retryCount: int

    def to_completion(self) -> LevelCompletion:
        return LevelCompletion(
            level_number=self.levelNumber,
            allies_saved=self.alliesSaved,
            time_spent=self.timeSpent,
            retry_count=self.retryCount,
        )


def describe_validation_error(error: ValidationError) -> List[str]:
    """Flatten pydantic errors into one readable message per field."""
    messages = []
    for item in error.errors():
        field = '.'.join(str(part) for part in item.get('loc', ())) or 'body'
        messages.append(f"{field}: {item.get('msg', 'invalid value')}")
    return messages
