# Services package init
"""
CityInfo API: Services Layer
============================

What:  Everything between the route handlers and the entity store.

Service Inventory:
    - CityInfoRepository (abstract): query/mutate contract over the store
    - InMemoryCityInfoRepository: backed by a CitiesDataStore
    - SqlAlchemyCityInfoRepository: backed by an AsyncSession
    - mapper: entity ↔ DTO conversions
    - validation: field and cross-field rules, error dictionaries
    - json_patch: JSON Patch application over DTO members
    - MailService (abstract), LocalMailService, CloudMailService
"""
