import re
from datetime import date, datetime
from flask import request
from models import COMPLAINT_CATEGORIES, HOTLINE_CATEGORIES

NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
PHONE_RE = re.compile(r"^(\+63|0)?9\d{9}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def as_text(value):
    # JSON bodies may carry numbers
    return "" if value is None else str(value)


def clean(value):
    return as_text(value).strip()


def is_valid_phone(number):
    return bool(PHONE_RE.match(re.sub(r"[\s-]", "", clean(number))))


def parse_date(value):
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def age_on(birth_date, today=None):
    today = today or date.today()
    return today.year - birth_date.year

#-------------------------------------------------------
# Profile field rules, shared by sign up and profile settings
def name_error(value):
    if len(value) < 2:
        return "Names must be at least 2 characters long"
    if not NAME_RE.match(value):
        return "Names must contain only letters, spaces, hyphens, or apostrophes"
    return None


def middle_name_error(value):
    if value and not NAME_RE.match(value):
        return "Middle name must contain only letters, spaces, hyphens, or apostrophes"
    return None


def address_error(value):
    # Address is optional
    if value and len(value) < 5:
        return "Address must be at least 5 characters if provided"
    return None


def barangay_error(value):
    if not value:
        return "Please select your barangay"
    return None


def birth_date_error(value):
    birth_date = parse_date(value)
    if birth_date is None:
        return "Please enter your birth date (YYYY-MM-DD)"
    if not 13 <= age_on(birth_date) <= 120:
        return "You must be between 13 and 120 years old"
    return None


def validate_sign_up(data):
    errors = {}
    first_name = clean(data.get("first_name"))
    last_name = clean(data.get("last_name"))
    password = as_text(data.get("password"))

    if not first_name or not last_name:
        errors["name"] = "First name and last name are required"
    else:
        message = name_error(first_name) or name_error(last_name)
        if message:
            errors["name"] = message

    if not EMAIL_RE.match(clean(data.get("email"))):
        errors["email"] = "Please enter a valid email address"

    if not is_valid_phone(data.get("contact_number")):
        errors["contact_number"] = "Please enter a valid Philippine phone number"

    checks = {
        "middle_name": middle_name_error(clean(data.get("middle_name"))),
        "address": address_error(clean(data.get("address"))),
        "barangay": barangay_error(clean(data.get("barangay"))),
        "birth_date": birth_date_error(data.get("birth_date")),
    }
    errors.update({field: message for field, message in checks.items() if message})

    if len(password) < 6:
        errors["password"] = "Password must be at least 6 characters long"
    elif password != as_text(data.get("repeat_password")):
        errors["repeat_password"] = "Passwords do not match"

    return errors


def validate_profile(data):
    """Sign-up rules applied to the fields present in ``data``."""
    rules = {
        "first_name": name_error,
        "last_name": name_error,
        "middle_name": middle_name_error,
        "address": address_error,
        "barangay": barangay_error,
    }
    errors = {}
    for field, rule in rules.items():
        if field in data:
            message = rule(clean(data.get(field)))
            if message:
                errors[field] = message

    if "contact_number" in data and not is_valid_phone(data.get("contact_number")):
        errors["contact_number"] = "Please enter a valid Philippine phone number"
    if clean(data.get("emergency_contact")) and not is_valid_phone(data.get("emergency_contact")):
        errors["emergency_contact"] = "Please enter a valid Philippine phone number"
    if "birth_date" in data:
        message = birth_date_error(data.get("birth_date"))
        if message:
            errors["birth_date"] = message
    return errors


def validate_complaint(data, guest=False):
    errors = {}
    if clean(data.get("category")) not in COMPLAINT_CATEGORIES:
        errors["category"] = "Please select a category"
    if not clean(data.get("location")):
        errors["location"] = "Location is required"

    title = clean(data.get("title"))
    if not title:
        errors["title"] = "Title is required"
    elif len(title) < 5:
        errors["title"] = "Title must be at least 5 characters"

    description = clean(data.get("description"))
    if not description:
        errors["description"] = "Description is required"
    elif len(description) < 20:
        errors["description"] = "Description must be at least 20 characters"

    if guest:
        if not clean(data.get("guest_name")):
            errors["guest_name"] = "Name is required"
        if not is_valid_phone(data.get("guest_phone")):
            errors["guest_phone"] = "Invalid Philippine mobile number format"
        guest_email = clean(data.get("guest_email"))
        if guest_email and not EMAIL_RE.match(guest_email):
            errors["guest_email"] = "Please enter a valid email address"
    return errors


def validate_article(data):
    errors = {}
    title = clean(data.get("title"))
    content = clean(data.get("content"))
    if not title:
        errors["title"] = "Title is required"
    elif len(title) < 10:
        errors["title"] = "Title must be at least 10 characters"
    if not content:
        errors["content"] = "Content is required"
    elif len(content) < 50:
        errors["content"] = "Content must be at least 50 characters"
    return errors


def validate_hotline(data):
    errors = {}
    for field in ("label", "number", "sim_type"):
        if not clean(data.get(field)):
            errors[field] = "This field is required"
    category = data.get("category") or "other"
    if category not in HOTLINE_CATEGORIES:
        errors["category"] = "Invalid category"
    return errors


def request_data():
    """JSON body or form fields as a plain dict."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
