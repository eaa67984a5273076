from pydantic import BaseModel


class TokenCreds(BaseModel):
    model_config = {"frozen": True}

    username: str = "admin"
    password: str = "password123"


class TokenResponse(BaseModel):
    token: str | None = None
    reason: str | None = None  # "Bad credentials" is returned with a 200
