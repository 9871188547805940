# 엔드포인트별 페이지네이션 제한
class PaginationLimits:
    USER_ITEMS = {"min": 1, "max": 100, "default": 50}
    POINT_TRANSACTIONS = {"min": 1, "max": 100, "default": 50}
