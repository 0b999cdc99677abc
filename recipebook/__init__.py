"""
Recipe Book - share recipes with a community feed.

Domain package used by the Streamlit front end in `streamlit_app/`:
- config: environment settings and logging setup
- models: recipe, profile and identity models
- platform: data-access clients (hosted REST backend or embedded SQLAlchemy store)
- auth: session provider
- recipes / validation: recipe operations and form validation
- presenters / controllers: view models and page state
"""
