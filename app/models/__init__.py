from .backpack_id_next_number import BackpackIdNextNumber
from .item import Item, item_tags
from .organization import Organization, organization_users
from .reset_token import ResetToken
from .tag import Tag
from .user import User
