from typing import Optional

from shared_utils.schema import CamelModel


class UserResponse(CamelModel):
    id: int
    username: str
    name: str
    email: Optional[str] = None
    phone: str
    role: str
    society_id: Optional[int] = None
    flat_number: Optional[str] = None
    is_active: Optional[bool] = None
