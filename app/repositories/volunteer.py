from sqlmodel import Session

from app.models.volunteer import Volunteer


class SqlVolunteerRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, volunteer_id: int) -> Volunteer | None:
        return self.session.get(Volunteer, volunteer_id)
