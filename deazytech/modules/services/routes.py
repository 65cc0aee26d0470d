from deazytech.core.crud_routes import ResourceForm, register_crud_routes
from . import services_bp
from .database import SCALAR_FIELDS

service_form = ResourceForm(
    SCALAR_FIELDS,
    list_fields=('features', 'benefits'),
    required=('title',),
    image_folder='services',
)

register_crud_routes(services_bp, 'services', service_form, label='Service')
