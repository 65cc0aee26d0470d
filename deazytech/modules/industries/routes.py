from deazytech.core.crud_routes import ResourceForm, register_crud_routes
from . import industries_bp
from .database import SCALAR_FIELDS

industry_form = ResourceForm(SCALAR_FIELDS, required=('name',), image_folder='industries')

register_crud_routes(industries_bp, 'industries', industry_form, label='Industry')
