from deazytech.core.crud_routes import ResourceForm, register_crud_routes
from . import clients_bp
from .database import SCALAR_FIELDS

client_form = ResourceForm(SCALAR_FIELDS, required=('name',), image_folder='clients')

register_crud_routes(clients_bp, 'clients', client_form, label='Client')
