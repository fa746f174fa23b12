from pydantic import BaseModel, ConfigDict


class UserModel(BaseModel):
    """Stored credential of one user."""

    username: str
    hash_password: str
    salt: str

    model_config = ConfigDict(from_attributes=True)
