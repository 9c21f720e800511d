# src/shared/error_codes.py
# Central mapping for the error contract.
# Keep keys stable; admin dashboard and mobile clients rely on these.
ERROR_CODES = {
    # ─── Validation & Requests ──────────────────────────────────────────────
    "validation_error": {
        "http": 400,
        "message": "Validation failed for one or more fields."
    },
    "invalid_upload": {
        "http": 400,
        "message": "Only jpeg, jpg, png and webp images up to 5MB are allowed."
    },
    "no_changes": {
        "http": 400,
        "message": "No changes detected."
    },
    "conflict": {
        "http": 400,
        "message": "A record with the same unique value already exists."
    },

    # ─── Authentication & Authorization ────────────────────────────────────
    "unauthorized": {
        "http": 401,
        "message": "Access Denied: No token provided"
    },
    "invalid_token": {
        "http": 400,
        "message": "Invalid Token"
    },
    "forbidden": {
        "http": 403,
        "message": "Access Denied: Admin privileges required"
    },

    # ─── Resources ─────────────────────────────────────────────────────────
    "not_found": {
        "http": 404,
        "message": "Resource not found."
    },
    "user_not_found": {
        "http": 404,
        "message": "User not found"
    },
    "blog_not_found": {
        "http": 404,
        "message": "Blog not found"
    },
    "clinic_not_found": {
        "http": 404,
        "message": "Clinic not found"
    },
    "doctor_not_found": {
        "http": 404,
        "message": "Verified doctor not found"
    },
    "product_not_found": {
        "http": 404,
        "message": "Product not found"
    },
    "plan_not_found": {
        "http": 404,
        "message": "Subscription plan not found"
    },
    "benefit_not_found": {
        "http": 404,
        "message": "Plan benefit not found"
    },
    "image_not_found": {
        "http": 404,
        "message": "Blog image not found"
    },

    # ─── External services ─────────────────────────────────────────────────
    "media_error": {
        "http": 502,
        "message": "Media host rejected the request."
    },

    # ─── Server ────────────────────────────────────────────────────────────
    "internal_error": {
        "http": 500,
        "message": "Internal server error."
    },
}
