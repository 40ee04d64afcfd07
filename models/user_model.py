from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "username": "janedoe",
                "password": "s3cret-passw0rd",
            }
        }
