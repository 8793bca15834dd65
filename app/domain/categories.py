from pydantic import BaseModel


class ServiceCategory(BaseModel):
    id: str
    name: str


SERVICE_CATEGORIES: list[ServiceCategory] = [
    ServiceCategory(id="cleaning", name="Cleaning Services"),
    ServiceCategory(id="beauty", name="Personal Grooming"),
    ServiceCategory(id="moving", name="Moving & Delivery"),
    ServiceCategory(id="education", name="Tutoring & Education"),
    ServiceCategory(id="tech", name="Tech Help & Repairs"),
    ServiceCategory(id="tailoring", name="Tailoring & Stitching"),
    ServiceCategory(id="food", name="Food & Catering"),
    ServiceCategory(id="pet_care", name="Pet Care"),
    ServiceCategory(id="vehicle", name="Vehicle Services"),
    ServiceCategory(id="repair", name="Home Repair & Installation"),
    ServiceCategory(id="yoga", name="Yoga & Fitness"),
    ServiceCategory(id="events", name="Event Services"),
]


def get_category(category_id: str) -> ServiceCategory | None:
    for category in SERVICE_CATEGORIES:
        if category.id == category_id:
            return category
    return None
