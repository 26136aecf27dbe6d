from __future__ import annotations

__all__ = ["IDs", "filter_dropdown_id", "user_delete_id", "department_delete_id", "dataset_card_id"]


class IDs:
    class Store:
        SESSION = "session-store"
        DATASETS = "datasets-store"
        SELECTED_DATASET = "selected-dataset"
        LOADED_DATASET = "loaded-dataset"
        FILTER_STATE = "filter-state"

    class Page:
        LOCATION = "url"
        CONTAINER = "page-container"
        NAVBAR = "navbar-container"
        NOTICE = "notice"

    class Control:
        # Login
        LOGIN_EMAIL = "login-email"
        LOGIN_PASSWORD = "login-password"
        LOGIN_BTN = "login-btn"
        LOGIN_RESET_BTN = "login-reset-btn"

        # Navbar / settings
        LOGOUT_BTN = "logout-btn"

        # Search
        DATASET_LIST = "dataset-list"
        UNLOCK_PANEL = "unlock-panel"
        UNLOCK_PASSWORD = "unlock-password"
        UNLOCK_BTN = "unlock-btn"
        UNLOCK_STATUS = "unlock-status"
        SEARCH_PANEL = "search-panel"
        SEARCH_INPUT = "search-input"
        FILTER_CONTAINER = "filter-container"
        COLUMN_PICKER = "column-picker"
        RESULTS_TITLE = "results-title"
        RESULTS_TABLE = "results-table"
        EXPORT_CSV_BTN = "export-csv-btn"
        EXPORT_PDF_BTN = "export-pdf-btn"
        DOWNLOAD = "export-download"

        # Manage
        DB_NAME = "db-name"
        DB_PASSWORD = "db-password"
        DB_DEPARTMENT = "db-department"
        DB_COLUMNS = "db-columns"
        DB_CREATE_BTN = "db-create-btn"
        DB_APPEND_SELECT = "db-append-select"
        DB_APPEND_VALUES = "db-append-values"
        DB_APPEND_BTN = "db-append-btn"
        DB_UPLOAD = "db-upload"
        DB_UPLOAD_NAME = "db-upload-name"
        DB_UPLOAD_BTN = "db-upload-btn"
        MANAGE_LIST = "manage-list"

        # Account settings
        ACCOUNT_FIELD = "account-field"
        ACCOUNT_VALUE = "account-value"
        ACCOUNT_SAVE_BTN = "account-save-btn"
        ACCOUNT_DETAILS = "account-details"
        PW_CURRENT = "pw-current"
        PW_NEW = "pw-new"
        PW_CONFIRM = "pw-confirm"
        PW_SAVE_BTN = "pw-save-btn"

        # Account management
        USERS_TABLE = "users-table"
        USER_FIRST = "user-first-name"
        USER_LAST = "user-last-name"
        USER_EMAIL = "user-email"
        USER_PASSWORD = "user-password"
        USER_ROLE = "user-role"
        USER_DEPARTMENT = "user-department"
        USER_ADD_BTN = "user-add-btn"
        USER_EDIT_SELECT = "user-edit-select"
        USER_EDIT_FIELD = "user-edit-field"
        USER_EDIT_VALUE = "user-edit-value"
        USER_EDIT_BTN = "user-edit-btn"

        # Department management
        DEPARTMENTS_TABLE = "departments-table"
        DEPARTMENT_NAME = "department-name"
        DEPARTMENT_ADD_BTN = "department-add-btn"
        DEPARTMENT_RENAME_SELECT = "department-rename-select"
        DEPARTMENT_RENAME_VALUE = "department-rename-value"
        DEPARTMENT_RENAME_BTN = "department-rename-btn"

    class Pattern:
        # pattern-matching "type" strings
        FILTER = "search-filter"
        DATASET_CARD = "dataset-card"
        USER_DELETE = "user-delete"
        DEPARTMENT_DELETE = "department-delete"


def filter_dropdown_id(column: str) -> dict:
    return {"type": IDs.Pattern.FILTER, "index": column}


def dataset_card_id(dataset_id: str) -> dict:
    return {"type": IDs.Pattern.DATASET_CARD, "index": dataset_id}


def user_delete_id(user_id: str) -> dict:
    return {"type": IDs.Pattern.USER_DELETE, "index": user_id}


def department_delete_id(department_id: str) -> dict:
    return {"type": IDs.Pattern.DEPARTMENT_DELETE, "index": department_id}
