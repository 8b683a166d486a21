# module pos_backend.utils.templates
from fastapi.templating import Jinja2Templates
from pos_backend.config import TEMPLATES_DIR

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
