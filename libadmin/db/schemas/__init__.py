"""
Domain-split Pydantic schemas with a single import surface.
"""

from .auth import SignInRequest, SignInResponse, CurrentUser
from .admin_users import (
    AdminPermissions,
    AdminPermissionsPatch,
    AdminUserCreate,
    AdminUserCreateResult,
    AdminUserUpdate,
    AdminUser,
    AuthContext,
)
from .libraries import (
    LibraryStats,
    LibraryBase,
    LibraryCreate,
    LibraryUpdate,
    Library,
    FloorBase,
    FloorCreate,
    FloorUpdate,
    Floor,
    ShelfBase,
    ShelfCreate,
    ShelfUpdate,
    Shelf,
    ShelfBookAdd,
    ShelfBook,
    ShelfWithBooks,
)
from .books import (
    BookStats,
    BookBase,
    BookCreate,
    BookUpdate,
    Book,
    BookLocationUpdate,
    BookLocation,
)
from .activity import (
    ScannedBook,
    DeviceInfo,
    ScanCreate,
    Scan,
    SavedId,
    Movement,
    CorrectionCreate,
    CorrectionUpdate,
    Correction,
)
from .analytics import (
    AnalyticsMetrics,
    TopMisplacedShelf,
    TopScannedBook,
    DailyAnalytics,
    TrendPoint,
    AnalyticsSummary,
    DashboardOverview,
    RollupRequest,
)
from .system import SystemFeatures, SystemSettings, SystemConfigUpdate, SystemConfig
from .audits import AuditLogBase, AuditLogCreate, AuditLog

__all__ = [
    "SignInRequest", "SignInResponse", "CurrentUser",
    "AdminPermissions", "AdminPermissionsPatch", "AdminUserCreate", "AdminUserCreateResult",
    "AdminUserUpdate", "AdminUser", "AuthContext",
    "LibraryStats", "LibraryBase", "LibraryCreate", "LibraryUpdate", "Library",
    "FloorBase", "FloorCreate", "FloorUpdate", "Floor",
    "ShelfBase", "ShelfCreate", "ShelfUpdate", "Shelf", "ShelfBookAdd", "ShelfBook", "ShelfWithBooks",
    "BookStats", "BookBase", "BookCreate", "BookUpdate", "Book", "BookLocationUpdate", "BookLocation",
    "ScannedBook", "DeviceInfo", "ScanCreate", "Scan", "SavedId",
    "Movement", "CorrectionCreate", "CorrectionUpdate", "Correction",
    "AnalyticsMetrics", "TopMisplacedShelf", "TopScannedBook", "DailyAnalytics", "TrendPoint",
    "AnalyticsSummary", "DashboardOverview", "RollupRequest",
    "SystemFeatures", "SystemSettings", "SystemConfigUpdate", "SystemConfig",
    "AuditLogBase", "AuditLogCreate", "AuditLog",
]
