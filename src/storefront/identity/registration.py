"""User registration — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class RegisterUser:
    """Create a shopper account. The credential arrives already hashed."""

    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    username = String(required=True, max_length=100)
    credential = String(required=True, max_length=255)
    phone = String(max_length=20)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["Email is already registered"]})

        user = User.register(
            name=command.name,
            email=command.email,
            username=command.username,
            credential=command.credential,
            phone=command.phone,
        )
        repo.add(user)
        return str(user.id)
