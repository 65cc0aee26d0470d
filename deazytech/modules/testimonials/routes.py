from deazytech.core.crud_routes import ResourceForm, register_crud_routes
from . import testimonials_bp
from .database import SCALAR_FIELDS

testimonial_form = ResourceForm(
    SCALAR_FIELDS,
    required=('name', 'role', 'company', 'content'),
    image_folder='testimonials',
)

register_crud_routes(testimonials_bp, 'testimonials', testimonial_form, label='Testimonial')
