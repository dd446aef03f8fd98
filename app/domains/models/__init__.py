# app/domains/models/__init__.py

"""
이 파일은 모든 도메인의 SQLModel 모델들을 한 곳에서 중앙 관리하여,
다른 모듈에서 쉽게 임포트할 수 있도록 하는 역할을 합니다.
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# school (School)
from app.domains.school.models import School

# usr (User, UserRole)
from app.domains.usr.models import User, UserRole

# climate (TemperatureZone, TemperatureVote, TemperatureHistory)
from app.domains.climate.models import TemperatureZone, TemperatureVote, TemperatureHistory

# maint (Request, RequestPriority, RequestStatus)
from app.domains.maint.models import Request, RequestPriority, RequestStatus

# notice (Announcement, AnnouncementType)
from app.domains.notice.models import Announcement, AnnouncementType

__all__ = [
    "School",
    "User", "UserRole",
    "TemperatureZone", "TemperatureVote", "TemperatureHistory",
    "Request", "RequestPriority", "RequestStatus",
    "Announcement", "AnnouncementType",
]
