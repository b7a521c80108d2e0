from django import forms
from django.conf import settings

from orders.status import OrderStatus

DEFAULT_PRODUCT_IMAGE = '/placeholder.svg?height=300&width=300'


def _category_label_choices():
    return [(label, label) for _, label in settings.PRODUCT_CATEGORIES]


class CheckoutForm(forms.Form):
    """
    Доставка + оплата. Платёжные данные только проверяются на заполненность,
    в orders-сервис они не уходят.
    """

    first_name = forms.CharField(
        label="First Name",
        max_length=100,
        error_messages={"required": "First name is required"},
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    last_name = forms.CharField(
        label="Last Name",
        max_length=100,
        error_messages={"required": "Last name is required"},
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    email = forms.EmailField(
        label="Email",
        error_messages={"required": "Email is required"},
        widget=forms.EmailInput(attrs={"class": "form-control"})
    )
    address = forms.CharField(
        label="Address",
        max_length=255,
        error_messages={"required": "Address is required"},
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    city = forms.CharField(
        label="City",
        max_length=100,
        error_messages={"required": "City is required"},
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    state = forms.CharField(
        label="State",
        max_length=100,
        error_messages={"required": "State is required"},
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    zip_code = forms.CharField(
        label="PIN Code",
        max_length=20,
        error_messages={"required": "PIN code is required"},
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    card_number = forms.CharField(
        label="Card Number",
        max_length=23,
        error_messages={"required": "Card number is required"},
        widget=forms.TextInput(attrs={
            "class": "form-control",
            "placeholder": "1234 5678 9012 3456",
            "autocomplete": "cc-number",
        })
    )
    expiry_date = forms.CharField(
        label="Expiry Date",
        max_length=7,
        error_messages={"required": "Expiry date is required"},
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "MM/YY", "autocomplete": "cc-exp"})
    )
    cvv = forms.CharField(
        label="CVV",
        max_length=4,
        error_messages={"required": "CVV is required"},
        widget=forms.PasswordInput(attrs={"class": "form-control", "placeholder": "123", "autocomplete": "cc-csc"})
    )

    def shipping_address(self):
        """Адрес одной строкой: "address, city, state zip"."""
        data = self.cleaned_data
        return f"{data['address']}, {data['city']}, {data['state']} {data['zip_code']}"


class ProductForm(forms.Form):
    """Создание/редактирование товара в админ-консоли."""

    name = forms.CharField(
        label="Product Name",
        max_length=200,
        error_messages={"required": "Product name is required"},
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    category = forms.ChoiceField(
        label="Category",
        choices=_category_label_choices,
        widget=forms.Select(attrs={"class": "form-select"})
    )
    description = forms.CharField(
        label="Description",
        error_messages={"required": "Description is required"},
        widget=forms.Textarea(attrs={"rows": 3, "class": "form-control"})
    )
    price = forms.DecimalField(
        label="Price (₹)",
        min_value=0,
        decimal_places=2,
        error_messages={"required": "Price is required", "min_value": "Price cannot be negative"},
        widget=forms.NumberInput(attrs={"class": "form-control", "step": "1"})
    )
    stock = forms.IntegerField(
        label="Stock Quantity",
        min_value=0,
        error_messages={"required": "Stock quantity is required", "min_value": "Stock must be non-negative"},
        widget=forms.NumberInput(attrs={"class": "form-control"})
    )
    image = forms.CharField(
        label="Image URL",
        required=False,
        max_length=500,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": DEFAULT_PRODUCT_IMAGE})
    )

    @classmethod
    def initial_for(cls, product):
        return {
            'name': product.name,
            'category': product.category,
            'description': product.description,
            'price': product.price,
            'stock': product.stock,
            'image': product.image,
        }

    def clean_image(self):
        return (self.cleaned_data.get('image') or '').strip() or DEFAULT_PRODUCT_IMAGE


class OrderStatusForm(forms.Form):
    status = forms.ChoiceField(choices=OrderStatus.choices)
