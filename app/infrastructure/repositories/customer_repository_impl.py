"""Customer repository implementation"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...domain.repositories.customer_repository import ICustomerRepository
from ..orm.customer_model import CustomerModel


class CustomerRepositoryImpl(ICustomerRepository):

    def __init__(self, session: Session):
        self.session = session

    async def upsert(self, email: str, name: str = "") -> int:
        email = email.lower()
        existing = self.session.query(CustomerModel).filter(CustomerModel.email == email).first()
        if existing:
            if name and not existing.name:
                existing.name = name
                self.session.flush()
            return existing.id

        model = CustomerModel(email=email, name=name or None)
        try:
            with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError:
            return self.session.query(CustomerModel).filter(CustomerModel.email == email).one().id
        return model.id
