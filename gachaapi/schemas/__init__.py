from .auth import AuthenticatedUser
from .gacha import GachaCatalogResponse, GachaDetailResponse, DrawResponse
from .user_item import OwnedItemsResponse, ConvertResponse, ShipmentResponse
from .points import ChargeRequest, ChargeResponse, WalletBalanceResponse
