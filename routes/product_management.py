"""
Product management routes: categories, products (with icon upload) and prices
"""
import time

from flask import Blueprint, current_app, request
from slugify import slugify
from sqlalchemy import func, or_

from models import db
from models.product import ProductCategory, Product, ProductPricing
from models.service_switching import ServiceSwitching
from routes.auth import token_required
from utils.audit import log_audit_trail
from utils.crud import apply_changes, change_status, delete_record, has_changes
from utils.helpers import get_request_data, parse_int
from utils.pagination import filter_value, page, read_list_params
from utils.responses import (
    blocked, duplicate, failed, no_changes, not_found, ok, paginated, validation_error,
)
from utils.serial import get_next_serial
from utils.uploads import UploadError, delete_icon_if_exists, save_product_icon
from utils.validators import validate_category, validate_product, validate_product_price

product_management_bp = Blueprint('product_management', __name__, url_prefix='/product-management')

CATEGORY_TABLE = 'product_categories'
PRODUCT_TABLE = 'products'
PRICE_TABLE = 'product_pricing'


def _unique_slug(model, name, exclude_id=None):
    """slugify(name), with a millisecond timestamp appended when the slug is taken"""
    slug = slugify(name)
    query = model.query.filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first():
        slug = f"{slug}-{int(time.time() * 1000)}"
    return slug


# ---------- Categories ----------

def _find_category_duplicate(name, exclude_id=None):
    query = ProductCategory.query.filter(func.lower(ProductCategory.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(ProductCategory.id != exclude_id)
    return query.first()


@product_management_bp.route('/category/add', methods=['POST'])
@token_required
def add_category():
    cleaned, errors = validate_category(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        if _find_category_duplicate(cleaned['name']):
            return duplicate(f"Category '{cleaned['name']}' already exists")

        category = ProductCategory(
            serial_no=get_next_serial(ProductCategory),
            slug=_unique_slug(ProductCategory, cleaned['name']),
            **cleaned,
        )
        db.session.add(category)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding product category: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(CATEGORY_TABLE, category.id, 'create', f"Created category {category.name}", category.status)
    return ok('Category added successfully', data=category.to_dict())


@product_management_bp.route('/category/get-list', methods=['GET', 'POST'])
@token_required
def list_categories():
    data = get_request_data()
    offset, limit, search = read_list_params(data)
    try:
        query = ProductCategory.query
        status = filter_value(data, 'status')
        if status:
            query = query.filter(func.lower(ProductCategory.status) == status.lower())
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(ProductCategory.name.ilike(pattern), ProductCategory.slug.ilike(pattern)))

        records_total = ProductCategory.query.count()
        records_filtered = query.count()
        rows = page(query.order_by(ProductCategory.serial_no.asc(), ProductCategory.id.asc()), offset, limit)
    except Exception as e:
        current_app.logger.error(f"Error listing product categories: {str(e)}", exc_info=True)
        return failed()

    return paginated('Category list fetched successfully', records_total, records_filtered,
                     [row.to_dict() for row in rows])


@product_management_bp.route('/category/byid/<int:category_id>', methods=['GET'])
@token_required
def get_category(category_id):
    category = db.session.get(ProductCategory, category_id)
    if not category:
        return not_found('Category not found')
    return ok('Category fetched successfully', data=category.to_dict())


@product_management_bp.route('/category/update/<int:category_id>', methods=['PUT'])
@token_required
def update_category(category_id):
    cleaned, errors = validate_category(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        category = db.session.get(ProductCategory, category_id)
        if not category:
            return not_found('Category not found')
        if _find_category_duplicate(cleaned['name'], exclude_id=category_id):
            return duplicate(f"Category '{cleaned['name']}' already exists")
        if not has_changes(category, cleaned):
            return no_changes()

        apply_changes(category, cleaned)
        category.slug = _unique_slug(ProductCategory, cleaned['name'], exclude_id=category_id)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating product category {category_id}: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(CATEGORY_TABLE, category_id, 'update', f"Updated category {category.name}", category.status)
    return ok('Category updated successfully', data=category.to_dict())


@product_management_bp.route('/category/delete/<int:category_id>', methods=['DELETE'])
@token_required
def delete_category(category_id):
    category = db.session.get(ProductCategory, category_id)
    if not category:
        return not_found('Category not found')
    if Product.query.filter_by(category_id=category_id).count():
        return blocked('Cannot delete category with assigned products')
    return delete_record(ProductCategory, category, CATEGORY_TABLE, 'Category',
                         f"Deleted category {category.name}")


@product_management_bp.route('/category/change-status/<int:category_id>', methods=['POST'])
@token_required
def change_category_status(category_id):
    return change_status(ProductCategory, category_id, CATEGORY_TABLE, 'Category')


# ---------- Products ----------

def _find_product_duplicate(category_id, name, exclude_id=None):
    query = Product.query.filter(
        Product.category_id == category_id,
        func.lower(Product.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    return query.first()


@product_management_bp.route('/products/add', methods=['POST'])
@token_required
def add_product():
    cleaned, errors = validate_product(get_request_data())
    if errors:
        return validation_error(errors[0])

    icon_url = None
    try:
        if not db.session.get(ProductCategory, cleaned['category_id']):
            return not_found('Category not found')
        if _find_product_duplicate(cleaned['category_id'], cleaned['name']):
            return duplicate(f"Product '{cleaned['name']}' already exists in this category")

        icon_file = request.files.get('icon')
        if icon_file and icon_file.filename:
            icon_url = save_product_icon(icon_file)

        product = Product(
            serial_no=get_next_serial(Product),
            slug=_unique_slug(Product, cleaned['name']),
            icon=icon_url,
            **cleaned,
        )
        db.session.add(product)
        db.session.commit()
    except UploadError as e:
        return validation_error(str(e))
    except Exception as e:
        db.session.rollback()
        delete_icon_if_exists(icon_url)
        current_app.logger.error(f"Error adding product: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(PRODUCT_TABLE, product.id, 'create', f"Created product {product.name}", product.status)
    return ok('Product added successfully', data=product.to_dict(), http_status=201)


@product_management_bp.route('/products/get-list', methods=['GET', 'POST'])
@token_required
def list_products():
    data = get_request_data()
    offset, limit, search = read_list_params(data)
    try:
        query = Product.query
        status = filter_value(data, 'status')
        if status:
            query = query.filter(func.lower(Product.status) == status.lower())
        category_id = parse_int(filter_value(data, 'category_id'))
        if category_id:
            query = query.filter(Product.category_id == category_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Product.name.ilike(pattern),
                Product.slug.ilike(pattern),
                Product.description.ilike(pattern),
            ))

        records_total = Product.query.count()
        records_filtered = query.count()
        rows = page(query.order_by(Product.serial_no.asc(), Product.id.asc()), offset, limit)
    except Exception as e:
        current_app.logger.error(f"Error listing products: {str(e)}", exc_info=True)
        return failed()

    return paginated('Product list fetched successfully', records_total, records_filtered,
                     [row.to_dict() for row in rows])


@product_management_bp.route('/products/byid/<int:product_id>', methods=['GET'])
@token_required
def get_product(product_id):
    product = db.session.get(Product, product_id)
    if not product:
        return not_found('Product not found')
    return ok('Product fetched successfully', data=product.to_dict())


@product_management_bp.route('/products/update/<int:product_id>', methods=['PUT'])
@token_required
def update_product(product_id):
    cleaned, errors = validate_product(get_request_data())
    if errors:
        return validation_error(errors[0])

    new_icon_url = None
    old_icon_url = None
    try:
        product = db.session.get(Product, product_id)
        if not product:
            return not_found('Product not found')
        if not db.session.get(ProductCategory, cleaned['category_id']):
            return not_found('Category not found')
        if _find_product_duplicate(cleaned['category_id'], cleaned['name'], exclude_id=product_id):
            return duplicate(f"Product '{cleaned['name']}' already exists in this category")

        icon_file = request.files.get('icon')
        has_new_icon = bool(icon_file and icon_file.filename)
        if not has_new_icon and not has_changes(product, cleaned):
            return no_changes()

        if has_new_icon:
            new_icon_url = save_product_icon(icon_file)
            old_icon_url = product.icon
            product.icon = new_icon_url
        if cleaned['name'] != product.name:
            product.slug = _unique_slug(Product, cleaned['name'], exclude_id=product_id)
        apply_changes(product, cleaned)
        db.session.commit()
    except UploadError as e:
        return validation_error(str(e))
    except Exception as e:
        db.session.rollback()
        delete_icon_if_exists(new_icon_url)
        current_app.logger.error(f"Error updating product {product_id}: {str(e)}", exc_info=True)
        return failed()

    delete_icon_if_exists(old_icon_url)
    log_audit_trail(PRODUCT_TABLE, product_id, 'update', f"Updated product {product.name}", product.status)
    return ok('Product updated successfully', data=product.to_dict())


@product_management_bp.route('/products/delete/<int:product_id>', methods=['DELETE'])
@token_required
def delete_product(product_id):
    product = db.session.get(Product, product_id)
    if not product:
        return not_found('Product not found')
    if ServiceSwitching.query.filter_by(product_id=product_id).count():
        return blocked('Cannot delete product with assigned service switchings')

    icon_url = product.icon
    response = delete_record(Product, product, PRODUCT_TABLE, 'Product',
                             f"Deleted product {product.name}", cascaded=(ProductPricing,))
    if response[1] == 200:
        delete_icon_if_exists(icon_url)
    return response


@product_management_bp.route('/products/change-status/<int:product_id>', methods=['POST'])
@token_required
def change_product_status(product_id):
    return change_status(Product, product_id, PRODUCT_TABLE, 'Product')


# ---------- Prices ----------

def _find_price_for_product(product_id, exclude_id=None):
    query = ProductPricing.query.filter(ProductPricing.product_id == product_id)
    if exclude_id is not None:
        query = query.filter(ProductPricing.id != exclude_id)
    return query.first()


@product_management_bp.route('/prices/add', methods=['POST'])
@token_required
def add_price():
    cleaned, errors = validate_product_price(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        if not db.session.get(Product, cleaned['product_id']):
            return not_found('Product not found')
        if _find_price_for_product(cleaned['product_id']):
            return duplicate('Price already exists for this product')

        price = ProductPricing(serial_no=get_next_serial(ProductPricing), **cleaned)
        db.session.add(price)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding product price: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(PRICE_TABLE, price.id, 'create',
                    f"Set price {price.currency} {cleaned['price']} for product {price.product_id}")
    return ok('Price added successfully', data=price.to_dict(), http_status=201)


@product_management_bp.route('/prices/get-list', methods=['GET', 'POST'])
@token_required
def list_prices():
    data = get_request_data()
    offset, limit, search = read_list_params(data)
    try:
        query = ProductPricing.query.join(Product, ProductPricing.product_id == Product.id)
        currency = filter_value(data, 'currency')
        if currency:
            query = query.filter(ProductPricing.currency == currency.upper())
        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))

        records_total = ProductPricing.query.count()
        records_filtered = query.count()
        rows = page(query.order_by(ProductPricing.serial_no.asc(), ProductPricing.id.asc()), offset, limit)
    except Exception as e:
        current_app.logger.error(f"Error listing product prices: {str(e)}", exc_info=True)
        return failed()

    return paginated('Price list fetched successfully', records_total, records_filtered,
                     [row.to_dict() for row in rows])


@product_management_bp.route('/prices/byid/<int:price_id>', methods=['GET'])
@token_required
def get_price(price_id):
    price = db.session.get(ProductPricing, price_id)
    if not price:
        return not_found('Price not found')
    return ok('Price fetched successfully', data=price.to_dict())


@product_management_bp.route('/prices/update/<int:price_id>', methods=['PUT'])
@token_required
def update_price(price_id):
    cleaned, errors = validate_product_price(get_request_data())
    if errors:
        return validation_error(errors[0])

    try:
        price = db.session.get(ProductPricing, price_id)
        if not price:
            return not_found('Price not found')
        if not db.session.get(Product, cleaned['product_id']):
            return not_found('Product not found')
        if _find_price_for_product(cleaned['product_id'], exclude_id=price_id):
            return duplicate('Price already exists for this product')
        if not has_changes(price, cleaned):
            return no_changes()

        apply_changes(price, cleaned)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating product price {price_id}: {str(e)}", exc_info=True)
        return failed()

    log_audit_trail(PRICE_TABLE, price_id, 'update',
                    f"Updated price to {price.currency} {cleaned['price']} for product {price.product_id}")
    return ok('Price updated successfully', data=price.to_dict())


@product_management_bp.route('/prices/delete/<int:price_id>', methods=['DELETE'])
@token_required
def delete_price(price_id):
    price = db.session.get(ProductPricing, price_id)
    if not price:
        return not_found('Price not found')
    return delete_record(ProductPricing, price, PRICE_TABLE, 'Price',
                         f"Deleted price for product {price.product_id}")
