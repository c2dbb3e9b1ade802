from sqlalchemy.orm import Session
from models.categories import Category


class CategoryService:

    @staticmethod
    def get_all_categories(db: Session) -> list[Category]:
        return db.query(Category).order_by(Category.name).all()
