from .controller import PromotionsController
from .logic import EMAIL_TEMPLATES, EmailTemplate
from .view import PromotionsView

__all__ = ["EMAIL_TEMPLATES", "EmailTemplate", "PromotionsController", "PromotionsView"]
