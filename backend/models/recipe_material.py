from models import db, price_value

class RecipeMaterial(db.Model):
    __tablename__ = 'recipe_materials'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False, index=True)
    material_name = db.Column(db.String(100), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    material_type = db.Column(db.String(50), nullable=False)  # e.g. 'ore', 'wood', 'drop'
    default_npc_price = db.Column(db.Float, nullable=False, default=0)

    def to_dict(self):
        return {
            'material_name': self.material_name,
            'quantity': self.quantity,
            'material_type': self.material_type,
            'default_npc_price': price_value(self.default_npc_price)
        }
