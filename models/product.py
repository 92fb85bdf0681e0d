"""
Product catalog models: categories, products and their price rows
"""
from models import db
from datetime import datetime
from utils.helpers import format_ist


class ProductCategory(db.Model):
    __tablename__ = 'product_categories'

    id = db.Column(db.Integer, primary_key=True)
    serial_no = db.Column(db.Integer, nullable=True, index=True)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    status = db.Column(db.String(10), nullable=False, default='Active')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = db.relationship('Product', backref='category', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'serial_no': self.serial_no,
            'name': self.name,
            'slug': self.slug,
            'status': self.status,
            'created_at': format_ist(self.created_at),
            'updated_at': format_ist(self.updated_at),
        }

    def __repr__(self):
        return f'<ProductCategory {self.name}>'


class Product(db.Model):
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    serial_no = db.Column(db.Integer, nullable=True, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey('product_categories.id'), nullable=False)
    name = db.Column(db.String(150), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False)
    description = db.Column(db.Text)
    icon = db.Column(db.String(500))  # public URL of the uploaded image
    status = db.Column(db.String(10), nullable=False, default='Inactive')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    pricing = db.relationship('ProductPricing', backref='product', uselist=False, lazy=True,
                              cascade='all, delete-orphan')
    service_switchings = db.relationship('ServiceSwitching', backref='product', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'serial_no': self.serial_no,
            'category_id': self.category_id,
            'category_name': self.category.name if self.category else None,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'icon': self.icon,
            'status': self.status,
            'created_at': format_ist(self.created_at),
            'updated_at': format_ist(self.updated_at),
        }

    def __repr__(self):
        return f'<Product {self.name}>'


class ProductPricing(db.Model):
    """At most one price row per product"""
    __tablename__ = 'product_pricing'

    id = db.Column(db.Integer, primary_key=True)
    serial_no = db.Column(db.Integer, nullable=True, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), unique=True, nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.String(10), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'serial_no': self.serial_no,
            'product_id': self.product_id,
            'product_name': self.product.name if self.product else None,
            'price': float(self.price),
            'currency': self.currency,
            'created_at': format_ist(self.created_at),
            'updated_at': format_ist(self.updated_at),
        }

    def __repr__(self):
        return f'<ProductPricing product={self.product_id} {self.price} {self.currency}>'
