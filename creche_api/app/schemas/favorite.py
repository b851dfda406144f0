from datetime import datetime

from pydantic import BaseModel, ConfigDict

from creche_api.app.schemas.creche import CrecheSummary


class FavoriteCreate(BaseModel):
    creche_id: int


class FavoriteRead(BaseModel):
    id: int
    creche_id: int
    created_at: datetime
    creche: CrecheSummary

    model_config = ConfigDict(from_attributes=True)


class FavoriteToggle(BaseModel):
    creche_id: int
    is_favorite: bool
