from models import db, price_value

class Recipe(db.Model):
    __tablename__ = 'recipes'
    __table_args__ = {'sqlite_autoincrement': True}  # ids are never handed out twice

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False, index=True)  # Not unique, but used for price lookups
    quantity_produced = db.Column(db.Integer, nullable=False)
    npc_sell_price = db.Column(db.Float, nullable=False, default=0)

    # Rows are removed by the database cascade, the ORM only mirrors it
    materials = db.relationship(
        'RecipeMaterial',
        backref='recipe',
        order_by='RecipeMaterial.id',
        cascade='all, delete-orphan',
        passive_deletes=True,
        lazy=True
    )

    def to_summary_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'npc_sell_price': price_value(self.npc_sell_price)
        }

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'quantity_produced': self.quantity_produced,
            'npc_sell_price': price_value(self.npc_sell_price),
            'materials': [material.to_dict() for material in self.materials]
        }
