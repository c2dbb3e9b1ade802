from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from models.products import Product
from schemas.product_schemas import ProductFilters, ProductSearchResult, ProductView
from utils.logger import get_logger
from utils.pagination import clamp_page, total_pages, offset_for

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# id breaks ties between rows created within the same clock tick
SORT_ORDERS = {
    "newest": (Product.created_at.desc(), Product.id.desc()),
    "oldest": (Product.created_at.asc(), Product.id.asc()),
    "price_asc": (Product.price.asc(), Product.id.asc()),
    "price_desc": (Product.price.desc(), Product.id.asc()),
    "name": (Product.name.asc(), Product.id.asc()),
}


class ProductService:

    @staticmethod
    def _filtered_query(filters: ProductFilters, db: Session):
        query = db.query(Product)

        if filters.search:
            query = query.filter(or_(
                Product.name.icontains(filters.search, autoescape=True),
                Product.description.icontains(filters.search, autoescape=True),
            ))

        if filters.category_id is not None:
            query = query.filter(Product.category_id == filters.category_id)

        if filters.min_price is not None:
            query = query.filter(Product.price >= filters.min_price)

        if filters.max_price is not None:
            query = query.filter(Product.price <= filters.max_price)

        return query

    @staticmethod
    def search_products(filters: ProductFilters, db: Session) -> ProductSearchResult:
        """
        Filter, sort and paginate the catalog.

        ``total`` counts every match regardless of the requested page.
        """
        page, page_size = clamp_page(filters.page, filters.page_size, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)

        query = ProductService._filtered_query(filters, db)
        total = query.count()

        products = (
            query.options(joinedload(Product.category))
            .order_by(*SORT_ORDERS.get(filters.sort_by, SORT_ORDERS["newest"]))
            .offset(offset_for(page, page_size))
            .limit(page_size)
            .all()
        )

        logger.debug(
            "Product search",
            extra={"filters": filters.model_dump(mode="json"), "total": total}
        )

        return ProductSearchResult(
            products=[ProductView.model_validate(product) for product in products],
            total=total,
            page=page,
            total_pages=total_pages(total, page_size),
        )
