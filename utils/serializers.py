def location_json(studio):
    return {
        "fullAddress": studio.full_address,
        "city": studio.city,
        "state": studio.state,
        "pinCode": studio.pin_code,
    }


def studio_json(studio, availability=None, rating=None):
    out = {
        "id": studio.id,
        "name": studio.name,
        "description": studio.description,
        "author": studio.owner_id,
        "equipments": studio.equipments or [],
        "images": studio.images or [],
        "location": location_json(studio),
        "pricePerHour": studio.price_per_hour,
        "operationalHours": {"start": studio.open_hour, "end": studio.close_hour},
        "packages": [
            {"key": p.key, "price": p.price, "description": p.description}
            for p in studio.packages
        ],
        "addons": [
            {"key": a.key, "price": a.price, "description": a.description, "maxQuantity": a.max_quantity}
            for a in studio.addons
        ],
        "approved": studio.approved,
        "createdAt": studio.created_at.isoformat(),
    }
    if availability is not None:
        out["availability"] = availability
    if rating is not None:
        out["ratingSummary"] = rating
    return out


def booking_json(booking, with_customer=False):
    studio = booking.studio
    out = {
        "id": booking.id,
        "studio": {
            "id": studio.id,
            "name": studio.name,
            "location": location_json(studio),
        } if studio else booking.studio_id,
        "customer": booking.customer_id,
        "date": booking.date.isoformat(),
        "hours": list(booking.hours),
        "packageKey": booking.package_key,
        "addons": [{"key": a.key, "quantity": a.quantity} for a in booking.addons],
        "totalPrice": booking.total_price,
        "paymentStatus": booking.payment_status,
        "createdAt": booking.created_at.isoformat(),
    }
    if with_customer and booking.customer:
        out["customer"] = {
            "id": booking.customer.id,
            "name": booking.customer.full_name,
            "email": booking.customer.email,
        }
    return out


def user_json(user):
    return {
        "id": user.id,
        "name": user.full_name,
        "email": user.email,
        "phone": user.phone_number,
        "roles": sorted(r.name for r in user.roles),
        "isVerified": user.is_verified,
    }
