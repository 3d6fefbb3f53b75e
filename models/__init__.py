from .db import db
from .user import User, Role, user_roles
from .audit_log import AuditLog
from .session import Session
from .verification_otp import VerificationOTP
from .studio import Studio, StudioPackage, StudioAddon
from .availability import Availability, AvailabilitySlot
from .booking import Booking, BookingAddon
from .review import Review
