from .user import User, USER_ROLES
from .complaint import Complaint, COMPLAINT_STATUSES, COMPLAINT_CATEGORIES
from .complaint_image import ComplaintImage
from .complaint_feedback import ComplaintFeedback
from .complaint_status_update import ComplaintStatusUpdate
from .complaint_reaction import ComplaintReaction, REACTION_TYPES
from .complaint_comment import ComplaintComment
from .article import Article
from .article_image import ArticleImage
from .emergency_hotline import EmergencyHotline, HOTLINE_CATEGORIES, HOTLINE_CATEGORY_LABELS
from .agency import Agency, AGENCY_CATEGORIES
from .notification import Notification
from .password_reset import PasswordReset



__all__ = ["User", "Complaint", "ComplaintImage", "ComplaintFeedback", "ComplaintStatusUpdate",
           "ComplaintReaction", "ComplaintComment", "Article", "ArticleImage", "EmergencyHotline",
           "Agency", "Notification", "PasswordReset", "USER_ROLES", "COMPLAINT_STATUSES",
           "COMPLAINT_CATEGORIES", "REACTION_TYPES", "HOTLINE_CATEGORIES", "HOTLINE_CATEGORY_LABELS",
           "AGENCY_CATEGORIES"]
