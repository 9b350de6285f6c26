# ==============================================================================
# DATOS SEMILLA
# ==============================================================================
# Se devuelven cuando una colección todavía no fue guardada.
# Pedidos y gastos arrancan vacíos.
# ==============================================================================

DEFAULT_USERS = [
    {'id': '1', 'username': 'admin', 'role': 'admin', 'name': 'Admin User'},
    {'id': '2', 'username': 'staff', 'role': 'staff', 'name': 'Staff Member'},
    {'id': '3', 'username': 'accountant', 'role': 'accountant', 'name': 'Accountant'},
]

# Variedades de Khakhra
DEFAULT_PRODUCTS = [
    {'id': '1', 'name': 'Plain Khakhra', 'category': 'Regular', 'price': 120, 'cost': 60,
     'stock': 500, 'unit': 'pack', 'lowStockThreshold': 100},
    {'id': '2', 'name': 'Methi Khakhra', 'category': 'Flavored', 'price': 140, 'cost': 70,
     'stock': 400, 'unit': 'pack', 'lowStockThreshold': 100},
    {'id': '3', 'name': 'Jeera Khakhra', 'category': 'Flavored', 'price': 140, 'cost': 70,
     'stock': 350, 'unit': 'pack', 'lowStockThreshold': 100},
    {'id': '4', 'name': 'Masala Khakhra', 'category': 'Flavored', 'price': 150, 'cost': 75,
     'stock': 450, 'unit': 'pack', 'lowStockThreshold': 100},
    {'id': '5', 'name': 'Garlic Khakhra', 'category': 'Flavored', 'price': 150, 'cost': 75,
     'stock': 300, 'unit': 'pack', 'lowStockThreshold': 100},
    {'id': '6', 'name': 'Pizza Khakhra', 'category': 'Premium', 'price': 180, 'cost': 90,
     'stock': 200, 'unit': 'pack', 'lowStockThreshold': 80},
    {'id': '7', 'name': 'Pani Puri Khakhra', 'category': 'Premium', 'price': 180, 'cost': 90,
     'stock': 180, 'unit': 'pack', 'lowStockThreshold': 80},
    {'id': '8', 'name': 'Pudina Khakhra', 'category': 'Flavored', 'price': 140, 'cost': 70,
     'stock': 250, 'unit': 'pack', 'lowStockThreshold': 100},
]

DEFAULT_RAW_MATERIALS = [
    {'id': '1', 'name': 'Wheat Flour', 'quantity': 500, 'unit': 'kg', 'costPerUnit': 40,
     'supplier': 'Grain Traders', 'lowStockThreshold': 100},
    {'id': '2', 'name': 'Cooking Oil', 'quantity': 200, 'unit': 'liters', 'costPerUnit': 150,
     'supplier': 'Oil Suppliers', 'lowStockThreshold': 50},
    {'id': '3', 'name': 'Salt', 'quantity': 50, 'unit': 'kg', 'costPerUnit': 20,
     'supplier': 'Spice Mart', 'lowStockThreshold': 10},
    {'id': '4', 'name': 'Cumin Seeds', 'quantity': 30, 'unit': 'kg', 'costPerUnit': 400,
     'supplier': 'Spice Mart', 'lowStockThreshold': 10},
    {'id': '5', 'name': 'Fenugreek Leaves', 'quantity': 15, 'unit': 'kg', 'costPerUnit': 500,
     'supplier': 'Spice Mart', 'lowStockThreshold': 5},
    {'id': '6', 'name': 'Spice Mix', 'quantity': 40, 'unit': 'kg', 'costPerUnit': 300,
     'supplier': 'Spice Mart', 'lowStockThreshold': 10},
    {'id': '7', 'name': 'Garlic Powder', 'quantity': 20, 'unit': 'kg', 'costPerUnit': 600,
     'supplier': 'Spice Mart', 'lowStockThreshold': 5},
    {'id': '8', 'name': 'Packaging Material', 'quantity': 1000, 'unit': 'pieces', 'costPerUnit': 5,
     'supplier': 'Pack Solutions', 'lowStockThreshold': 200},
]

DEFAULT_CUSTOMERS = [
    {'id': '1', 'name': 'Rajesh Patel', 'email': 'rajesh@example.com', 'phone': '9876543210',
     'address': '123 MG Road, Ahmedabad, Gujarat 380001', 'gstNumber': '24AAAAA0000A1Z5'},
    {'id': '2', 'name': 'Priya Shah', 'email': 'priya@example.com', 'phone': '9876543211',
     'address': '456 SG Highway, Ahmedabad, Gujarat 380015'},
    {'id': '3', 'name': 'Mumbai Retail Store', 'email': 'orders@mumbaistore.com',
     'phone': '9876543212', 'address': '789 Linking Road, Mumbai, Maharashtra 400050',
     'gstNumber': '27BBBBB1111B1Z5'},
    {'id': '4', 'name': 'Delhi Supermart', 'email': 'delhi@example.com', 'phone': '9876543213',
     'address': '321 Connaught Place, New Delhi 110001', 'gstNumber': '07CCCCC2222C1Z5'},
]
