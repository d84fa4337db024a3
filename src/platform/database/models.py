"""
Database Models
Import all models here to ensure they are registered with SQLAlchemy
"""

from src.platform.database.orm_db_setting import Base
from src.service.cabin.driven_adapter.model.cabin_model import (
    BookingContactModel,
    BookingModel,
    BookingSemesterModel,
    BookingTermsModel,
    CabinModel,
)
from src.service.document.driven_adapter.model.document_model import (
    DocumentCategoryModel,
    DocumentModel,
)
from src.service.event.driven_adapter.model.event_model import (
    EventCategoryModel,
    EventModel,
    EventSlotModel,
    SignUpModel,
)
from src.service.file.driven_adapter.model.file_model import FileModel
from src.service.listing.driven_adapter.model.listing_model import ListingModel
from src.service.organization.driven_adapter.model.organization_model import (
    MemberModel,
    OrganizationModel,
)
from src.service.product.driven_adapter.model.product_model import (
    MerchantModel,
    OrderModel,
    PaymentAttemptModel,
    ProductModel,
)
from src.service.user.driven_adapter.model.user_model import StudyProgramModel, UserModel


__all__ = [
    'Base',
    'BookingContactModel',
    'BookingModel',
    'BookingSemesterModel',
    'BookingTermsModel',
    'CabinModel',
    'DocumentCategoryModel',
    'DocumentModel',
    'EventCategoryModel',
    'EventModel',
    'EventSlotModel',
    'FileModel',
    'ListingModel',
    'MemberModel',
    'MerchantModel',
    'OrderModel',
    'OrganizationModel',
    'PaymentAttemptModel',
    'ProductModel',
    'SignUpModel',
    'StudyProgramModel',
    'UserModel',
]
