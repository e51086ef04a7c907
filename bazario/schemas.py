"""Request validation and response serialization.

The nested campaign blobs (target demographics and sales materials) are
validated as explicit records so the stored JSON always has every sub-field.
"""
from marshmallow import EXCLUDE, fields, post_load, pre_load, validate

from bazario import ma
from bazario.models.application import APPLICATION_STATUSES
from bazario.models.campaign import (
    CAMPAIGN_STATUSES, COMMISSION_TYPES, empty_demographics, empty_sales_materials
)
from bazario.models.profile import USER_TYPES

INDIAN_STATES = [
    "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh",
    "Goa", "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand", "Karnataka",
    "Kerala", "Madhya Pradesh", "Maharashtra", "Manipur", "Meghalaya", "Mizoram",
    "Nagaland", "Odisha", "Punjab", "Rajasthan", "Sikkim", "Tamil Nadu",
    "Telangana", "Tripura", "Uttar Pradesh", "Uttarakhand", "West Bengal",
    "Delhi", "Jammu and Kashmir", "Ladakh", "Lakshadweep", "Puducherry",
    "Andaman and Nicobar Islands", "Chandigarh", "Dadra and Nagar Haveli and Daman and Diu"
]
AGE_GROUPS = ["18-25", "26-35", "36-45", "46-55", "55+"]
INCOME_LEVELS = ["Below 2L", "2-5L", "5-10L", "10-20L", "20L+"]


def unique_in_order(values):
    seen = []
    for value in values or []:
        if value not in seen:
            seen.append(value)
    return seen


def blank_to_none(data, keys):
    if not isinstance(data, dict):
        return data
    cleaned = dict(data)
    for key in keys:
        if isinstance(cleaned.get(key), str) and not cleaned[key].strip():
            cleaned[key] = None
    return cleaned


class BaseSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE


# ------------------ PROFILES ------------------
class RegisterSchema(BaseSchema):
    full_name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=6))
    user_type = fields.String(required=True, validate=validate.OneOf(USER_TYPES))
    company_name = fields.String(allow_none=True, validate=validate.Length(max=255))
    city = fields.String(allow_none=True, validate=validate.Length(max=100))
    state = fields.String(allow_none=True, validate=validate.Length(max=100))
    phone = fields.String(allow_none=True, validate=validate.Length(max=30))
    bio = fields.String(allow_none=True)

    @post_load
    def normalize_email(self, data, **kwargs):
        data['email'] = data['email'].strip().lower()
        return data


class LoginSchema(BaseSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)


class ProfileUpdateSchema(BaseSchema):
    full_name = fields.String(validate=validate.Length(min=1, max=255))
    company_name = fields.String(allow_none=True, validate=validate.Length(max=255))
    city = fields.String(allow_none=True, validate=validate.Length(max=100))
    state = fields.String(allow_none=True, validate=validate.Length(max=100))
    phone = fields.String(allow_none=True, validate=validate.Length(max=30))
    bio = fields.String(allow_none=True)


class ProfileSchema(BaseSchema):
    id = fields.String()
    full_name = fields.String()
    email = fields.String()
    user_type = fields.String()
    company_name = fields.String(allow_none=True)
    city = fields.String(allow_none=True)
    state = fields.String(allow_none=True)
    phone = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    created_at = fields.DateTime()


class SellerSummarySchema(BaseSchema):
    full_name = fields.String(allow_none=True)
    email = fields.String(allow_none=True)
    phone = fields.String(allow_none=True)
    city = fields.String(allow_none=True)
    state = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)


# ------------------ CAMPAIGNS ------------------
class TargetDemographicsSchema(BaseSchema):
    age_groups = fields.List(fields.String(validate=validate.OneOf(AGE_GROUPS)), load_default=list)
    income_levels = fields.List(fields.String(validate=validate.OneOf(INCOME_LEVELS)), load_default=list)
    interests = fields.String(load_default='', validate=validate.Length(max=1000))

    @post_load
    def dedupe(self, data, **kwargs):
        merged = empty_demographics()
        merged.update(data)
        merged['age_groups'] = unique_in_order(merged['age_groups'])
        merged['income_levels'] = unique_in_order(merged['income_levels'])
        merged['interests'] = (merged['interests'] or '').strip()
        return merged


class SalesMaterialsSchema(BaseSchema):
    brochures = fields.Url(allow_none=True, load_default=None)
    videos = fields.Url(allow_none=True, load_default=None)
    training_docs = fields.Url(allow_none=True, load_default=None)

    @pre_load
    def drop_blank_links(self, data, **kwargs):
        return blank_to_none(data, ('brochures', 'videos', 'training_docs'))

    @post_load
    def fill_missing(self, data, **kwargs):
        merged = empty_sales_materials()
        merged.update(data)
        return merged


class CampaignSchema(BaseSchema):
    id = fields.String(dump_only=True)
    user_id = fields.String(dump_only=True)
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    description = fields.String(required=True, validate=validate.Length(min=1))
    product_images = fields.List(fields.Url(), load_default=list)
    commission_rate = fields.Float(required=True, validate=validate.Range(min=0, max=100))
    commission_type = fields.String(load_default='percentage', validate=validate.OneOf(COMMISSION_TYPES))
    target_regions = fields.List(fields.String(validate=validate.Length(min=1, max=100)), load_default=list)
    target_demographics = fields.Nested(TargetDemographicsSchema, load_default=empty_demographics)
    sales_materials = fields.Nested(SalesMaterialsSchema, load_default=empty_sales_materials)
    status = fields.String(dump_only=True, validate=validate.OneOf(CAMPAIGN_STATUSES))
    owner_name = fields.Method('get_owner_name', dump_only=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)

    def get_owner_name(self, campaign):
        owner = getattr(campaign, 'owner', None)
        return owner.display_name if owner else 'Anonymous'

    @post_load
    def normalize(self, data, **kwargs):
        # partial loads skip load_default, so only touch what was sent
        if 'target_regions' in data:
            data['target_regions'] = unique_in_order(r.strip() for r in data['target_regions'] if r.strip())
        if 'product_images' in data:
            data['product_images'] = unique_in_order(data['product_images'])
        if 'target_demographics' in data:
            merged = empty_demographics()
            merged.update(data['target_demographics'] or {})
            data['target_demographics'] = merged
        if 'sales_materials' in data:
            merged = empty_sales_materials()
            merged.update(data['sales_materials'] or {})
            data['sales_materials'] = merged
        return data


class CampaignSummarySchema(BaseSchema):
    id = fields.String()
    title = fields.String()
    commission_rate = fields.Float()
    sales_materials = fields.Nested(SalesMaterialsSchema)
    status = fields.String()


class CampaignStatsSchema(BaseSchema):
    id = fields.String()
    title = fields.String()
    commission_rate = fields.Float()
    status = fields.String()
    applications_count = fields.Integer()
    approved_count = fields.Integer()
    pending_count = fields.Integer()


# ------------------ APPLICATIONS ------------------
class ApplicationCreateSchema(BaseSchema):
    campaign_id = fields.String(required=True, validate=validate.Length(min=1, max=36))
    application_message = fields.String(allow_none=True, load_default=None,
                                        validate=validate.Length(max=2000))

    @pre_load
    def drop_blank_message(self, data, **kwargs):
        return blank_to_none(data, ('application_message',))


class ApplicationSchema(BaseSchema):
    id = fields.String()
    campaign_id = fields.String()
    seller_id = fields.String()
    application_message = fields.String(allow_none=True)
    status = fields.String(validate=validate.OneOf(APPLICATION_STATUSES))
    applied_at = fields.DateTime()
    reviewed_at = fields.DateTime(allow_none=True)


class ReviewApplicationSchema(ApplicationSchema):
    campaign = fields.Nested(CampaignSummarySchema)
    seller = fields.Nested(SellerSummarySchema)


class SellerApplicationSchema(ApplicationSchema):
    campaign = fields.Nested(CampaignSummarySchema)


register_schema = RegisterSchema()
login_schema = LoginSchema()
profile_schema = ProfileSchema()
profile_update_schema = ProfileUpdateSchema()
campaign_schema = CampaignSchema()
campaigns_schema = CampaignSchema(many=True)
campaign_stats_schema = CampaignStatsSchema(many=True)
application_create_schema = ApplicationCreateSchema()
application_schema = ApplicationSchema()
review_applications_schema = ReviewApplicationSchema(many=True)
seller_applications_schema = SellerApplicationSchema(many=True)
