from deazytech.core.crud_routes import ResourceForm, register_crud_routes
from . import experts_bp
from .database import SCALAR_FIELDS

expert_form = ResourceForm(
    SCALAR_FIELDS,
    list_fields=('expertise',),
    required=('name', 'role'),
    image_folder='experts',
)

register_crud_routes(experts_bp, 'experts', expert_form, label='Expert', title='Team Experts')
